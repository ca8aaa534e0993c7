"""Gateway 业务服务 -- 身份解析、任务/项目仓储"""
