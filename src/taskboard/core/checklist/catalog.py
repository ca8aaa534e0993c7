"""部署检查清单目录 -- 10 个分类 + 40 个检查项

目录随版本发布，运行期不可变；新增检查项由 load() 自动回填为未完成。
"""

from ..env import validate_env
from ..models import ChecklistCategory, ChecklistCategoryInfo, ChecklistItem

C = ChecklistCategory

CHECKLIST_CATEGORIES: dict[ChecklistCategory, ChecklistCategoryInfo] = {
    info.id: info
    for info in (
        ChecklistCategoryInfo(
            id=C.ENVIRONMENT,
            name="Environment & Configuration",
            description="Environment variables, configuration files, and settings",
            icon="Settings",
        ),
        ChecklistCategoryInfo(
            id=C.DATABASE,
            name="Database",
            description="Database setup, migrations, and data integrity",
            icon="Database",
        ),
        ChecklistCategoryInfo(
            id=C.AUTHENTICATION,
            name="Authentication & Security",
            description="User authentication, authorization, and security measures",
            icon="Shield",
        ),
        ChecklistCategoryInfo(
            id=C.PERFORMANCE,
            name="Performance",
            description="Application performance, optimization, and load times",
            icon="Zap",
        ),
        ChecklistCategoryInfo(
            id=C.TESTING,
            name="Testing & QA",
            description="Testing procedures, quality assurance, and bug fixes",
            icon="CheckCircle",
        ),
        ChecklistCategoryInfo(
            id=C.ACCESSIBILITY,
            name="Accessibility",
            description="Web accessibility standards and compliance",
            icon="Accessibility",
        ),
        ChecklistCategoryInfo(
            id=C.SEO,
            name="SEO & Metadata",
            description="Search engine optimization and metadata",
            icon="Search",
        ),
        ChecklistCategoryInfo(
            id=C.MONITORING,
            name="Monitoring & Logging",
            description="Error tracking, monitoring, and logging",
            icon="LineChart",
        ),
        ChecklistCategoryInfo(
            id=C.SECURITY,
            name="Security",
            description="Security best practices and vulnerability prevention",
            icon="Lock",
        ),
        ChecklistCategoryInfo(
            id=C.DOCUMENTATION,
            name="Documentation",
            description="User documentation, code documentation, and deployment guides",
            icon="FileText",
        ),
    )
}


def check_required_env_vars() -> bool:
    """自动检查：必需环境变量均已设置"""
    return validate_env().valid


def _item(
    item_id: str,
    title: str,
    description: str,
    category: ChecklistCategory,
    critical: bool = False,
    automated_check=None,
) -> ChecklistItem:
    return ChecklistItem(
        id=item_id,
        title=title,
        description=description,
        category=category,
        critical=critical,
        automated_check=automated_check,
    )


DEPLOYMENT_CHECKLIST: tuple[ChecklistItem, ...] = (
    # Environment & Configuration
    _item(
        "env-required-vars",
        "Verify required environment variables",
        "Ensure all required environment variables are set in the production environment",
        C.ENVIRONMENT,
        critical=True,
        automated_check=check_required_env_vars,
    ),
    _item(
        "env-secrets",
        "Secure sensitive environment variables",
        "Ensure API keys, tokens, and secrets are secured and never returned to clients",
        C.ENVIRONMENT,
        critical=True,
    ),
    _item(
        "env-app-config",
        "Verify application configuration",
        "Check service settings (log format, data directory, site URL) for production",
        C.ENVIRONMENT,
    ),
    _item(
        "env-cors",
        "Configure CORS settings",
        "Ensure Cross-Origin Resource Sharing (CORS) is properly configured for production APIs",
        C.ENVIRONMENT,
        critical=True,
    ),
    # Database
    _item(
        "db-migrations",
        "Run database migrations",
        "Ensure all database migrations are applied to the production database",
        C.DATABASE,
        critical=True,
    ),
    _item(
        "db-backup",
        "Create database backup",
        "Create a backup of the production database before deploying",
        C.DATABASE,
        critical=True,
    ),
    _item(
        "db-indexes",
        "Optimize database indexes",
        "Ensure database indexes are optimized for production queries",
        C.DATABASE,
    ),
    _item(
        "db-connection-pool",
        "Configure database connection pool",
        "Ensure database connection pool is properly configured for production load",
        C.DATABASE,
    ),
    # Authentication & Security
    _item(
        "auth-routes",
        "Secure authentication routes",
        "Verify that all authentication routes and middleware are working correctly",
        C.AUTHENTICATION,
        critical=True,
    ),
    _item(
        "auth-password-reset",
        "Test password reset flow",
        "Ensure the password reset flow works correctly in the production environment",
        C.AUTHENTICATION,
        critical=True,
    ),
    _item(
        "auth-session",
        "Configure session settings",
        "Ensure session timeout, cookie settings, and refresh tokens are properly configured",
        C.AUTHENTICATION,
        critical=True,
    ),
    _item(
        "auth-roles",
        "Verify user roles and permissions",
        "Ensure user roles and permissions are correctly implemented and enforced",
        C.AUTHENTICATION,
    ),
    # Performance
    _item(
        "perf-bundle-size",
        "Optimize bundle size",
        "Analyze and optimize front-end bundle size for faster loading",
        C.PERFORMANCE,
    ),
    _item(
        "perf-image-optimization",
        "Optimize images",
        "Ensure all images are optimized, properly sized, and use modern formats",
        C.PERFORMANCE,
    ),
    _item(
        "perf-caching",
        "Configure caching",
        "Set up appropriate caching headers for static assets and API responses",
        C.PERFORMANCE,
    ),
    _item(
        "perf-lazy-loading",
        "Implement lazy loading",
        "Ensure components and routes use lazy loading where appropriate",
        C.PERFORMANCE,
    ),
    # Testing & QA
    _item(
        "test-e2e",
        "Run end-to-end tests",
        "Execute end-to-end tests against the production build",
        C.TESTING,
        critical=True,
    ),
    _item(
        "test-browser-compatibility",
        "Test browser compatibility",
        "Verify the application works correctly in all supported browsers",
        C.TESTING,
        critical=True,
    ),
    _item(
        "test-mobile-responsiveness",
        "Test mobile responsiveness",
        "Ensure the application is fully responsive on mobile devices",
        C.TESTING,
        critical=True,
    ),
    _item(
        "test-error-handling",
        "Verify error handling",
        "Test error scenarios and ensure they are handled gracefully",
        C.TESTING,
        critical=True,
    ),
    # Accessibility
    _item(
        "a11y-keyboard-navigation",
        "Test keyboard navigation",
        "Ensure the application can be fully navigated using only the keyboard",
        C.ACCESSIBILITY,
    ),
    _item(
        "a11y-screen-readers",
        "Test with screen readers",
        "Verify the application works correctly with screen readers",
        C.ACCESSIBILITY,
    ),
    _item(
        "a11y-color-contrast",
        "Check color contrast",
        "Ensure all text has sufficient color contrast for readability",
        C.ACCESSIBILITY,
    ),
    _item(
        "a11y-aria",
        "Verify ARIA attributes",
        "Ensure ARIA attributes are correctly implemented for interactive elements",
        C.ACCESSIBILITY,
    ),
    # SEO & Metadata
    _item(
        "seo-meta-tags",
        "Verify meta tags",
        "Ensure all pages have appropriate title, description, and other meta tags",
        C.SEO,
    ),
    _item(
        "seo-sitemap",
        "Generate sitemap",
        "Create and verify the sitemap.xml file",
        C.SEO,
    ),
    _item(
        "seo-robots",
        "Configure robots.txt",
        "Ensure robots.txt is properly configured for production",
        C.SEO,
    ),
    _item(
        "seo-structured-data",
        "Implement structured data",
        "Add structured data (JSON-LD) for rich search results",
        C.SEO,
    ),
    # Monitoring & Logging
    _item(
        "monitoring-error-tracking",
        "Set up error tracking",
        "Configure error tracking service (e.g., Sentry) for production",
        C.MONITORING,
        critical=True,
    ),
    _item(
        "monitoring-performance",
        "Set up performance monitoring",
        "Configure performance monitoring for production",
        C.MONITORING,
    ),
    _item(
        "monitoring-alerts",
        "Configure alerts",
        "Set up alerts for critical errors and performance issues",
        C.MONITORING,
        critical=True,
    ),
    _item(
        "monitoring-logging",
        "Configure logging",
        "Ensure structured JSON logging is enabled for production",
        C.MONITORING,
    ),
    # Security
    _item(
        "security-headers",
        "Configure security headers",
        "Set up appropriate security headers (CSP, HSTS, etc.)",
        C.SECURITY,
        critical=True,
    ),
    _item(
        "security-xss",
        "Prevent XSS vulnerabilities",
        "Ensure protection against cross-site scripting (XSS) attacks",
        C.SECURITY,
        critical=True,
    ),
    _item(
        "security-csrf",
        "Implement CSRF protection",
        "Ensure protection against cross-site request forgery (CSRF) attacks",
        C.SECURITY,
        critical=True,
    ),
    _item(
        "security-dependencies",
        "Audit dependencies",
        "Run a security audit on Python and front-end dependencies and fix vulnerabilities",
        C.SECURITY,
        critical=True,
    ),
    # Documentation
    _item(
        "docs-readme",
        "Update README",
        "Ensure README is up-to-date with deployment instructions",
        C.DOCUMENTATION,
    ),
    _item(
        "docs-api",
        "Document API endpoints",
        "Ensure all API endpoints are documented",
        C.DOCUMENTATION,
    ),
    _item(
        "docs-env-vars",
        "Document environment variables",
        "Ensure all environment variables are documented with examples",
        C.DOCUMENTATION,
    ),
    _item(
        "docs-deployment",
        "Create deployment guide",
        "Document the deployment process step by step",
        C.DOCUMENTATION,
    ),
)

_ITEMS_BY_ID: dict[str, ChecklistItem] = {item.id: item for item in DEPLOYMENT_CHECKLIST}


def get_checklist_item(item_id: str) -> ChecklistItem | None:
    return _ITEMS_BY_ID.get(item_id)


def get_items_by_category(category: ChecklistCategory) -> list[ChecklistItem]:
    return [item for item in DEPLOYMENT_CHECKLIST if item.category == category]


def get_categories_with_items() -> list[tuple[ChecklistCategoryInfo, list[ChecklistItem]]]:
    """按分类顺序返回 (分类信息, 检查项列表)"""
    return [
        (info, get_items_by_category(category))
        for category, info in CHECKLIST_CATEGORIES.items()
    ]
