"""内容与配置的默认值：记录文件缺失时以此为基础返回给前端。

所有默认值都只包含 TOML 可以表达的类型（不含 ``None``），取用时一律深拷贝。
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any

SITE_CONFIG_DEFAULTS: dict[str, Any] = {
    "site": {
        "name": "Your Website",
        "tagline": "Professional services for your business",
        "logo": "/images/logo.svg",
        "favicon": "/favicon.ico",
        "url": "https://yourwebsite.com",
    },
    "contact": {
        "email": "admin@example.com",
        "phone": "",
        "address": "",
    },
    "social": {},
}

SEO_CONFIG_DEFAULTS: dict[str, Any] = {
    "global": {
        "site_title": "Your Website Name",
        "site_description": "Professional services for your business needs",
        "site_keywords": ["business", "services", "professional", "solutions"],
        "social_image": "/images/social-share.jpg",
        "favicon": "/favicon.ico",
        "google_analytics_id": "",
        "enable_indexing": True,
    },
    "pages": {
        "home": {
            "title": "Your Website - Professional Services for Business",
            "description": "Professional services for your business needs.",
            "keywords": ["business", "services", "professional", "home"],
            "canonical_url": "https://yourwebsite.com",
            "og_type": "website",
        },
        "about": {
            "title": "About Our Company | Your Website",
            "description": "Learn about our company's mission, vision, and the team behind our success.",
            "keywords": ["about us", "company", "team", "mission"],
            "canonical_url": "https://yourwebsite.com/about",
            "og_type": "website",
        },
        "services": {
            "title": "Our Services | Your Website",
            "description": "Explore our comprehensive range of services.",
            "keywords": ["services", "business solutions", "consulting"],
            "canonical_url": "https://yourwebsite.com/services",
            "og_type": "website",
        },
        "contact": {
            "title": "Contact Us | Your Website",
            "description": "Get in touch with our team for inquiries, support, or to schedule a consultation.",
            "keywords": ["contact", "support", "help", "inquiry"],
            "canonical_url": "https://yourwebsite.com/contact",
            "og_type": "website",
        },
    },
}

THEME_CONFIG_DEFAULTS: dict[str, Any] = {
    "colors": {
        "primary": "#3b82f6",
        "secondary": "#10b981",
    },
    "fonts": {
        "heading": "Inter",
        "body": "Inter",
    },
    "mode": {
        "enable_dark_mode": True,
        "default_theme": "light",
    },
}

NAVIGATION_CONFIG_DEFAULTS: dict[str, Any] = {
    "main": {
        "items": [
            {"label": "Home", "href": "/"},
            {
                "label": "Services",
                "href": "/services",
                "children": [
                    {"label": "Consulting", "href": "/services/consulting"},
                    {"label": "Research", "href": "/services/research"},
                    {"label": "Corporate Training", "href": "/services/corporate-training"},
                ],
            },
            {"label": "About", "href": "/about"},
            {"label": "Contact", "href": "/contact"},
        ],
    },
}

CONFIG_DEFAULTS: dict[str, dict[str, Any]] = {
    "site": SITE_CONFIG_DEFAULTS,
    "seo": SEO_CONFIG_DEFAULTS,
    "theme": THEME_CONFIG_DEFAULTS,
    "navigation": NAVIGATION_CONFIG_DEFAULTS,
}

SYSTEM_SETTINGS_DEFAULTS: dict[str, Any] = {
    "general": {
        "site_name": "Your Website",
        "site_tagline": "Professional services for your business",
        "site_logo": "/images/logo.svg",
        "favicon": "/favicon.ico",
        "admin_email": "admin@example.com",
        "timezone": "UTC",
        "date_format": "YYYY-MM-DD",
        "time_format": "24h",
    },
    "appearance": {
        "primary_color": "#3b82f6",
        "secondary_color": "#10b981",
        "font_heading": "Inter",
        "font_body": "Inter",
        "enable_dark_mode": True,
        "default_theme": "light",
        "custom_css": "",
    },
    "notifications": {
        "email_notifications": True,
        "content_updates": True,
        "security_alerts": True,
        "newsletter_frequency": "weekly",
        "notification_email": "admin@example.com",
    },
    "security": {
        "two_factor_auth": False,
        "password_expiry_days": 90,
        "session_timeout_minutes": 30,
        "allowed_login_attempts": 5,
        "require_strong_passwords": True,
    },
    "content": {
        "enable_comments": True,
        "moderate_comments": True,
        "enable_revisions": True,
        "max_revisions": 10,
        "auto_save_interval": 60,
    },
    "advanced": {
        "maintenance_mode": False,
        "debug_mode": False,
        "cache_enabled": True,
        "cache_lifetime": 3600,
        "gzip_compression": True,
        "minify_html": True,
        "minify_css": True,
        "minify_js": True,
    },
    "meta": {
        "updated_by": "system",
    },
}

CONTENT_DEFAULTS: dict[str, dict[str, dict[str, Any]]] = {
    "pages": {
        "home": {
            "meta": {
                "title": "Welcome to Our Website",
                "description": "Professional services for your business needs",
                "keywords": ["business", "services", "professional"],
            },
            "hero": {
                "title": "Transform Your Business",
                "subtitle": "Professional solutions that drive results",
                "cta_text": "Get Started",
                "cta_link": "/contact",
                "background_image": "/images/hero-bg.jpg",
            },
            "features": [],
        },
        "about": {
            "meta": {
                "title": "About Us",
                "description": "Learn about our company and team",
                "keywords": ["about", "company", "team"],
            },
            "hero": {
                "title": "About Our Company",
                "subtitle": "Our story and mission",
            },
            "content": {
                "story": "Our company story goes here...",
                "mission": "Our mission statement...",
                "vision": "Our vision for the future...",
            },
        },
    },
    "components": {
        "testimonials": {
            "settings": {
                "title": "What Our Clients Say",
                "subtitle": "Real feedback from real customers",
                "display_count": 3,
            },
            "testimonials": [],
        },
        "gallery": {
            "settings": {
                "title": "Our Gallery",
                "subtitle": "Showcase of our work",
            },
            "images": [],
        },
    },
}


def config_defaults(kind: str) -> dict[str, Any]:
    return deepcopy(CONFIG_DEFAULTS[kind])


def system_settings_defaults() -> dict[str, Any]:
    return deepcopy(SYSTEM_SETTINGS_DEFAULTS)


def content_defaults(section: str, item: str) -> dict[str, Any]:
    """返回 ``(section, item)`` 的默认内容；未登记的条目返回只含 ``meta`` 的通用结构。"""
    known = CONTENT_DEFAULTS.get(section, {}).get(item)
    if known is not None:
        return deepcopy(known)
    return {
        "meta": {
            "title": item[:1].upper() + item[1:],
            "description": f"{item} page content",
            "keywords": [item],
        }
    }
