"""Pydantic models for site configuration."""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_EXCLUDE_PATTERNS = [
    r"^\d+\.html$",
    r"^(bg|shape|section-shape|right-img|help-img|experience-img|download-img"
    r"|quote-here-img|what-do-img|popular-posts-\d+|owl\.video\.play)\.html$",
    r"^(fade|backblue)\.html$",
]


class Organization(BaseModel):
    """Who the site belongs to and where it is published."""

    name: str = Field(..., description="Organization name used as the title suffix.")
    base_url: str = Field(
        ..., alias="baseUrl", description="Public origin used for canonical URLs."
    )
    description_suffix: str = Field(
        "",
        alias="descriptionSuffix",
        description="Sentence appended to synthesized meta descriptions.",
    )

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class PageConfig(BaseModel):
    """Explicit metadata for one page, keyed by filename."""

    title: Optional[str] = Field(None, description="Title used verbatim.")
    description: Optional[str] = Field(None, description="Meta description used verbatim.")
    h1: Optional[str] = Field(None, description="Text for the page's single H1.")
    keywords: Optional[str] = Field(None, description="Meta keywords, comma separated.")
    image: Optional[str] = Field(None, description="Absolute URL of the social share image.")

    model_config = ConfigDict(frozen=True)


class SitemapRule(BaseModel):
    """Priority and change frequency for a sitemap entry."""

    priority: str = Field("0.6", description="Sitemap priority between 0.0 and 1.0.")
    changefreq: str = Field("monthly", description="Sitemap change frequency.")

    model_config = ConfigDict(frozen=True)


class SocialConfig(BaseModel):
    """Open Graph and Twitter card defaults."""

    site_name: Optional[str] = Field(
        None, alias="siteName", description="Defaults to the organization name."
    )
    twitter_handle: Optional[str] = Field(None, alias="twitterHandle")
    default_image: Optional[str] = Field(None, alias="defaultImage")
    default_description: str = Field("", alias="defaultDescription")
    facebook_page: Optional[str] = Field(None, alias="facebookPage")
    locale: str = "en_US"
    theme_color: str = Field("#4a90e2", alias="themeColor")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class Address(BaseModel):
    street_address: str = Field(..., alias="streetAddress")
    locality: str
    region: str
    postal_code: str = Field(..., alias="postalCode")
    country: str

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class Location(BaseModel):
    """Office location, matched against filenames by keyword."""

    name: str
    keywords: List[str] = Field(default_factory=list)
    address: Address
    telephone: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class Service(BaseModel):
    """Service offering, matched against filenames by keyword."""

    name: str
    description: str
    service_type: str = Field(..., alias="serviceType")
    keywords: List[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class CompanyProfile(BaseModel):
    """Business facts rendered into JSON-LD structured data."""

    alternate_name: Optional[str] = Field(None, alias="alternateName")
    logo: Optional[str] = None
    description: str = ""
    email: Optional[str] = None
    telephone: Optional[str] = None
    founding_date: Optional[str] = Field(None, alias="foundingDate")
    number_of_employees: Optional[str] = Field(None, alias="numberOfEmployees")
    industry: Optional[str] = None
    same_as: List[str] = Field(default_factory=list, alias="sameAs")
    opening_hours: str = Field("Mo-Fr 09:00-18:00", alias="openingHours")
    currencies: str = "INR"
    languages: List[str] = Field(default_factory=lambda: ["English"])
    locations: List[Location] = Field(default_factory=list)
    services: List[Service] = Field(default_factory=list)
    main_pages: List[str] = Field(
        default_factory=lambda: ["index.html"],
        alias="mainPages",
        description="Pages that carry the full Organization schema.",
    )
    contact_page: str = Field("contact.html", alias="contactPage")
    about_page: str = Field("company-profile.html", alias="aboutPage")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class RobotsConfig(BaseModel):
    """Content of the generated robots.txt."""

    disallow: List[str] = Field(
        default_factory=lambda: [
            "/admin/",
            "/private/",
            "/temp/",
            "/.git/",
            "/node_modules/",
            "/search",
            "/*?*",
        ]
    )
    allow: List[str] = Field(
        default_factory=lambda: ["/assets/", "/images/", "/css/", "/js/"]
    )
    crawl_delay: int = Field(1, alias="crawlDelay")
    allowed_bots: List[str] = Field(
        default_factory=lambda: ["Googlebot", "Bingbot", "Slurp"], alias="allowedBots"
    )
    blocked_bots: List[str] = Field(
        default_factory=lambda: ["AhrefsBot", "MJ12bot", "DotBot"], alias="blockedBots"
    )

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class AccessibilityConfig(BaseModel):
    """Selectors and overrides used by the accessibility and SEO rules."""

    content_selectors: List[str] = Field(
        default_factory=lambda: [
            "main",
            ".container",
            ".page-title-content",
            ".header-content-right",
        ],
        alias="contentSelectors",
        description="Prioritized containers that receive a synthesized H1.",
    )
    card_selectors: List[str] = Field(
        default_factory=lambda: [
            ".single-opportunity",
            ".partners-item",
            ".single-company",
            ".contolib-slider-item",
        ],
        alias="cardSelectors",
    )
    decorative_selectors: List[str] = Field(
        default_factory=lambda: [".slider-shape", ".shape", ".bg", ".section-shape"],
        alias="decorativeSelectors",
    )
    image_alt: Dict[str, str] = Field(
        default_factory=dict,
        alias="imageAlt",
        description="Alt text overrides keyed by image file name.",
    )

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class SecurityConfig(BaseModel):
    """Allowlists and required headers for the scanners."""

    trusted_domains: List[str] = Field(
        default_factory=lambda: [
            "cdnjs.cloudflare.com",
            "cdn.jsdelivr.net",
            "unpkg.com",
            "code.jquery.com",
            "stackpath.bootstrapcdn.com",
            "maxcdn.bootstrapcdn.com",
            "fonts.googleapis.com",
            "fonts.gstatic.com",
        ],
        alias="trustedDomains",
    )
    sensitive_files: List[str] = Field(
        default_factory=lambda: [
            ".env",
            ".env.local",
            ".env.production",
            "config.php",
            "wp-config.php",
            "database.php",
            ".htpasswd",
            "id_rsa",
            "id_dsa",
            "private.key",
            "server.key",
        ],
        alias="sensitiveFiles",
    )
    security_headers: List[str] = Field(
        default_factory=lambda: [
            "X-Content-Type-Options",
            "X-Frame-Options",
            "X-XSS-Protection",
            "Referrer-Policy",
            "Content-Security-Policy",
        ],
        alias="securityHeaders",
    )
    https_exceptions: List[str] = Field(
        default_factory=list,
        alias="httpsExceptions",
        description="Hosts whose http:// URLs are left untouched.",
    )

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class PostDeployConfig(BaseModel):
    """Live checks run against the deployed site."""

    pages: List[str] = Field(
        default_factory=lambda: [
            "/",
            "/about.html",
            "/services.html",
            "/contact.html",
            "/careers.html",
        ]
    )
    assets: List[str] = Field(
        default_factory=lambda: [
            "/assets/css/style.css",
            "/assets/js/main.js",
            "/assets/img/logo.png",
        ]
    )
    contact_page: str = Field("/contact.html", alias="contactPage")
    timeout: float = Field(10.0, description="Per-request timeout in seconds.")
    max_response_ms: int = Field(3000, alias="maxResponseMs")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class SiteConfig(BaseModel):
    """Top-level configuration loaded from site.yaml."""

    organization: Organization
    pages: Dict[str, PageConfig] = Field(
        default_factory=dict, description="Per-page metadata keyed by filename."
    )
    sitemap: Dict[str, SitemapRule] = Field(
        default_factory=dict, description="Sitemap rules keyed by filename."
    )
    sitemap_default: SitemapRule = Field(default_factory=SitemapRule, alias="sitemapDefault")
    exclude_patterns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS), alias="excludePatterns"
    )
    excluded_dirs: List[str] = Field(
        default_factory=lambda: ["assets", "node_modules", "vendor", ".git"],
        alias="excludedDirs",
    )
    recursive: bool = Field(False, description="Descend into subdirectories.")
    social: SocialConfig = Field(default_factory=SocialConfig)
    company: CompanyProfile = Field(default_factory=CompanyProfile)
    robots: RobotsConfig = Field(default_factory=RobotsConfig)
    accessibility: AccessibilityConfig = Field(default_factory=AccessibilityConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    postdeploy: PostDeployConfig = Field(default_factory=PostDeployConfig)

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def page(self, filename: str) -> Optional[PageConfig]:
        return self.pages.get(filename)

    def sitemap_rule(self, filename: str) -> SitemapRule:
        return self.sitemap.get(filename, self.sitemap_default)

    @property
    def site_name(self) -> str:
        return self.social.site_name or self.organization.name


__all__ = [
    "AccessibilityConfig",
    "Address",
    "CompanyProfile",
    "DEFAULT_EXCLUDE_PATTERNS",
    "Location",
    "Organization",
    "PageConfig",
    "PostDeployConfig",
    "RobotsConfig",
    "SecurityConfig",
    "Service",
    "SitemapRule",
    "SiteConfig",
    "SocialConfig",
]
