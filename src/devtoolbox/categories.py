"""
Category keys, display titles and icons for the tool directory.
"""

CATEGORY_TITLES: dict[str, str] = {
    "ai": "AI & Machine Learning",
    "frontend": "Frontend",
    "backend": "Backend",
    "developer-tools": "Developer Tools",
    "apis": "APIs",
    "database": "Database",
    "debugging": "Debugging",
    "testing": "Testing",
    "deployment": "Deployment",
    "version-control": "Version Control",
    "package-manager": "Package Manager",
    "devops": "DevOps",
    "automation": "Automation",
    "monitoring": "Monitoring",
    "performance": "Performance",
    "security": "Security",
    "cli": "CLI",
    "design": "Design",
    "documentation": "Documentation",
    "productivity": "Productivity",
    "collaboration": "Collaboration",
    "mobile": "Mobile",
    "cloud": "Cloud",
    "analytics": "Analytics",
}

CATEGORY_ICONS: dict[str, str] = {
    "ai": "fas fa-robot",
    "frontend": "fas fa-paint-brush",
    "backend": "fas fa-server",
    "developer-tools": "fas fa-wrench",
    "apis": "fas fa-plug",
    "database": "fas fa-database",
    "debugging": "fas fa-bug",
    "testing": "fas fa-vial",
    "deployment": "fas fa-cloud-upload-alt",
    "version-control": "fas fa-code-branch",
    "package-manager": "fas fa-box",
    "devops": "fas fa-cogs",
    "automation": "fas fa-magic",
    "monitoring": "fas fa-chart-line",
    "performance": "fas fa-tachometer-alt",
    "security": "fas fa-shield-alt",
    "cli": "fas fa-terminal",
    "design": "fas fa-palette",
    "documentation": "fas fa-book",
    "productivity": "fas fa-rocket",
    "collaboration": "fas fa-users",
    "mobile": "fas fa-mobile-alt",
    "cloud": "fas fa-cloud",
    "analytics": "fas fa-chart-bar",
}

DEFAULT_ICON = "fas fa-tools"


def category_title(key: str) -> str:
    """Display title for a category key, falling back to the key itself."""
    return CATEGORY_TITLES.get(key.lower(), key)


def category_icon(key: str) -> str:
    return CATEGORY_ICONS.get(key.lower(), DEFAULT_ICON)
