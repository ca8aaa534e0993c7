"""Gateway 中间件 -- 请求日志、配置守卫、会话守卫"""
