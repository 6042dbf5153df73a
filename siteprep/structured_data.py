"""JSON-LD structured data for organization, location and service pages."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from .dom import Document
from .models import CompanyProfile, Location, Service, SiteConfig
from .pipeline import FileIdentity, Rule, RuleSet

SCHEMA_CONTEXT = "https://schema.org"
LD_JSON = "application/ld+json"


def _postal_address(location: Location, *, named: bool = False) -> Dict[str, Any]:
    address: Dict[str, Any] = {"@type": "PostalAddress"}
    if named:
        address["name"] = location.name
    address.update(
        {
            "streetAddress": location.address.street_address,
            "addressLocality": location.address.locality,
            "addressRegion": location.address.region,
            "postalCode": location.address.postal_code,
            "addressCountry": location.address.country,
        }
    )
    return address


def _compact(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if value not in (None, "", [])}


def _service_item(service: Service) -> Dict[str, Any]:
    return {
        "@type": "Service",
        "name": service.name,
        "description": service.description,
        "serviceType": service.service_type,
    }


def organization_schema(site: SiteConfig) -> Dict[str, Any]:
    company = site.company
    org = site.organization
    schema = {
        "@context": SCHEMA_CONTEXT,
        "@type": "Organization",
        "name": org.name,
        "alternateName": company.alternate_name,
        "url": org.base_url,
        "logo": company.logo,
        "description": company.description,
        "email": company.email,
        "telephone": company.telephone,
        "foundingDate": company.founding_date,
        "numberOfEmployees": company.number_of_employees,
        "industry": company.industry,
        "sameAs": list(company.same_as),
        "address": [_postal_address(location) for location in company.locations],
    }
    if company.telephone or company.email:
        schema["contactPoint"] = _compact(
            {
                "@type": "ContactPoint",
                "telephone": company.telephone,
                "contactType": "customer service",
                "email": company.email,
                "availableLanguage": list(company.languages),
            }
        )
    if company.services:
        schema["hasOfferCatalog"] = {
            "@type": "OfferCatalog",
            "name": "Services",
            "itemListElement": [
                {"@type": "Offer", "itemOffered": _service_item(service)}
                for service in company.services
            ],
        }
    return _compact(schema)


def local_business_schema(site: SiteConfig, location: Location) -> Dict[str, Any]:
    company = site.company
    schema = {
        "@context": SCHEMA_CONTEXT,
        "@type": "LocalBusiness",
        "name": f"{site.organization.name} - {location.name}",
        "description": company.description,
        "url": site.organization.base_url,
        "telephone": location.telephone or company.telephone,
        "email": company.email,
        "address": _postal_address(location),
        "openingHours": company.opening_hours,
        "currenciesAccepted": company.currencies,
    }
    if location.latitude and location.longitude:
        schema["geo"] = {
            "@type": "GeoCoordinates",
            "latitude": location.latitude,
            "longitude": location.longitude,
        }
    return _compact(schema)


def service_schema(site: SiteConfig, service: Service) -> Dict[str, Any]:
    company = site.company
    schema = _service_item(service)
    schema = {"@context": SCHEMA_CONTEXT, **schema}
    schema["provider"] = _compact(
        {
            "@type": "Organization",
            "name": site.organization.name,
            "url": site.organization.base_url,
            "telephone": company.telephone,
            "email": company.email,
        }
    )
    schema["areaServed"] = [
        {"@type": "City", "name": location.address.locality} for location in company.locations
    ]
    return _compact(schema)


def website_schema(site: SiteConfig) -> Dict[str, Any]:
    company = site.company
    base = site.organization.base_url
    return _compact(
        {
            "@context": SCHEMA_CONTEXT,
            "@type": "WebSite",
            "name": site.organization.name,
            "alternateName": company.alternate_name,
            "url": base,
            "description": company.description,
            "publisher": _compact(
                {"@type": "Organization", "name": site.organization.name, "logo": company.logo}
            ),
            "potentialAction": {
                "@type": "SearchAction",
                "target": {
                    "@type": "EntryPoint",
                    "urlTemplate": f"{base}/search?q={{search_term_string}}",
                },
                "query-input": "required name=search_term_string",
            },
        }
    )


def contact_page_schema(site: SiteConfig) -> Dict[str, Any]:
    company = site.company
    name = site.organization.name
    return _compact(
        {
            "@context": SCHEMA_CONTEXT,
            "@type": "ContactPage",
            "name": f"Contact Us - {name}",
            "description": f"Get in touch with {name}.",
            "url": f"{site.organization.base_url}/{company.contact_page}",
            "mainEntity": _compact(
                {
                    "@type": "Organization",
                    "name": name,
                    "telephone": company.telephone,
                    "email": company.email,
                    "address": [
                        _postal_address(location, named=True) for location in company.locations
                    ],
                }
            ),
        }
    )


def about_page_schema(site: SiteConfig) -> Dict[str, Any]:
    company = site.company
    name = site.organization.name
    return _compact(
        {
            "@context": SCHEMA_CONTEXT,
            "@type": "AboutPage",
            "name": f"About {name}",
            "description": company.description,
            "url": f"{site.organization.base_url}/{company.about_page}",
            "mainEntity": _compact(
                {
                    "@type": "Organization",
                    "name": name,
                    "description": company.description,
                    "foundingDate": company.founding_date,
                    "numberOfEmployees": company.number_of_employees,
                    "industry": company.industry,
                    "url": site.organization.base_url,
                    "logo": company.logo,
                }
            ),
        }
    )


def _keyword_match(filename: str, items: List[Any]) -> Optional[Any]:
    lowered = filename.lower()
    for item in items:
        if any(keyword.lower() in lowered for keyword in item.keywords):
            return item
    return None


def schemas_for(identity: FileIdentity) -> List[Dict[str, Any]]:
    site = identity.site
    company: CompanyProfile = site.company
    filename = identity.filename
    schemas: List[Dict[str, Any]] = []

    if filename in company.main_pages:
        schemas.append(organization_schema(site))
    location = _keyword_match(filename, company.locations)
    if location is not None:
        schemas.append(local_business_schema(site, location))
    service = _keyword_match(filename, company.services)
    if service is not None:
        schemas.append(service_schema(site, service))
    if filename == "index.html":
        schemas.append(website_schema(site))
    if filename == company.contact_page:
        schemas.append(contact_page_schema(site))
    if filename == company.about_page:
        schemas.append(about_page_schema(site))
    return schemas


def _existing_payloads(doc: Document) -> List[Any]:
    payloads: List[Any] = []
    for script in doc.find_all("script", {"type": LD_JSON}):
        try:
            payloads.append(json.loads(script.string or ""))
        except json.JSONDecodeError:
            payloads.append(None)
    return payloads


def apply_structured_data(doc: Document, identity: FileIdentity) -> bool:
    """Replace JSON-LD blocks unless they already hold exactly these schemas."""

    schemas = schemas_for(identity)
    if not schemas or _existing_payloads(doc) == schemas:
        return False

    for script in doc.find_all("script", {"type": LD_JSON}):
        script.decompose()
    head = doc.head()
    for schema in schemas:
        head.append(
            doc.new_element(
                "script", {"type": LD_JSON}, json.dumps(schema, ensure_ascii=False, indent=2)
            )
        )
    doc.note(f"Added {len(schemas)} structured data schema(s)")
    return True


RULE_SET = RuleSet(
    name="structured-data",
    report_type="structured-data",
    title="Structured Data Report",
    rules=(
        Rule(
            "json-ld",
            apply_structured_data,
            "Validate the generated JSON-LD with the Rich Results Test.",
        ),
    ),
)


__all__ = [
    "RULE_SET",
    "about_page_schema",
    "apply_structured_data",
    "contact_page_schema",
    "local_business_schema",
    "organization_schema",
    "schemas_for",
    "service_schema",
    "website_schema",
]
