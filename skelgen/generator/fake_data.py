"""Fake value synthesis backed by Faker.

Values are looked up first by name, against an ordered catalog of semantic
categories, and then by type. Catalog order matters: the first pattern that
is a case-insensitive substring of the name wins.
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from faker import Faker

from skelgen.generator.types import ArrayOf, Primitive, PrimitiveKind, ResolvedType
from skelgen.lib.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class FakeProvider:
    """One catalog entry: the Faker method and the name patterns that select it."""

    method: str
    patterns: tuple[str, ...]


def _entry(method: str, *patterns: str) -> FakeProvider:
    return FakeProvider(method=method, patterns=patterns)


FAKE_CATALOG: tuple[tuple[str, tuple[FakeProvider, ...]], ...] = (
    ("Lorem", (_entry("text", "text"),)),
    (
        "Person",
        (
            _entry("prefix_male", "titleMale"),
            _entry("prefix_female", "titleFemale"),
            _entry("name", "name", "user", "member"),
            _entry("first_name", "firstName"),
            _entry("first_name_male", "firstNameMale"),
            _entry("first_name_female", "firstNameFemale"),
            _entry("last_name", "lastName"),
        ),
    ),
    (
        "Address",
        (
            _entry("address", "address"),
            _entry("city_prefix", "cityPrefix"),
            _entry("secondary_address", "secondaryAddress"),
            _entry("state", "state"),
            _entry("state_abbr", "stateAbbr"),
            _entry("city_suffix", "citySuffix"),
            _entry("street_suffix", "streetSuffix"),
            _entry("building_number", "buildingNumber"),
            _entry("city", "city"),
            _entry("street_name", "streetName"),
            _entry("street_address", "streetAddress"),
            _entry("postcode", "postcode"),
            _entry("country", "country"),
            _entry("latitude", "latitude"),
            _entry("longitude", "longitude"),
        ),
    ),
    (
        "Phone",
        (
            _entry("phone_number", "phoneNumber", "phone"),
            _entry("phone_number", "tollFreePhoneNumber"),
            _entry("msisdn", "e164PhoneNumber"),
        ),
    ),
    (
        "Company",
        (
            _entry("catch_phrase", "catchPhrase"),
            _entry("company", "company"),
            _entry("company_suffix", "companySuffix"),
            _entry("job", "jobTitle"),
        ),
    ),
    ("Text", (_entry("paragraph", "realText", "content", "text", "article", "description"),)),
    (
        "DateTime",
        (
            _entry("unix_time", "unixTime"),
            _entry("date_time", "dateTime"),
            _entry("date_time_ad", "dateTimeAD"),
            _entry("iso8601", "iso8601"),
            _entry("date", "date"),
            _entry("time", "time"),
            _entry("date_time_between", "dateTimeBetween"),
            _entry("date_time_between", "dateTimeInInterval"),
            _entry("date_time_this_century", "dateTimeThisCentury"),
            _entry("date_time_this_decade", "dateTimeThisDecade"),
            _entry("date_time_this_year", "dateTimeThisYear"),
            _entry("date_time_this_month", "dateTimeThisMonth"),
            _entry("day_of_month", "dayOfMonth"),
            _entry("day_of_week", "dayOfWeek"),
            _entry("month", "month"),
            _entry("month_name", "monthName"),
            _entry("year", "year"),
            _entry("century", "century"),
            _entry("timezone", "timezone"),
        ),
    ),
    (
        "Internet",
        (
            _entry("email", "email"),
            _entry("safe_email", "safeEmail"),
            _entry("free_email", "freeEmail"),
            _entry("company_email", "companyEmail"),
            _entry("free_email_domain", "freeEmailDomain"),
            _entry("safe_domain_name", "safeEmailDomain"),
            _entry("user_name", "userName"),
            _entry("password", "password"),
            _entry("domain_name", "domainName"),
            _entry("domain_word", "domainWord"),
            _entry("tld", "tld"),
            _entry("url", "url"),
            _entry("slug", "slug"),
            _entry("ipv4", "ipv4"),
            _entry("ipv4_private", "localIpv4"),
            _entry("ipv6", "ipv6"),
            _entry("mac_address", "macAddress"),
        ),
    ),
    (
        "UserAgent",
        (
            _entry("user_agent", "userAgent"),
            _entry("chrome", "chrome"),
            _entry("firefox", "firefox"),
            _entry("safari", "safari"),
            _entry("opera", "opera"),
            _entry("internet_explorer", "internetExplorer"),
        ),
    ),
    (
        "Payment",
        (
            _entry("credit_card_provider", "creditCardType"),
            _entry("credit_card_number", "creditCardNumber", "creditCard"),
            _entry("credit_card_expire", "creditCardExpirationDate"),
            _entry("credit_card_expire", "creditCardExpirationDateString"),
            _entry("credit_card_full", "creditCardDetails"),
            _entry("iban", "iban"),
            _entry("swift", "swiftBicNumber"),
        ),
    ),
    ("Color", (_entry("color_name", "color"),)),
    (
        "Image",
        (
            _entry("image_url", "imageUrl"),
            _entry("image_url", "image", "img", "jpg"),
        ),
    ),
    ("Uuid", (_entry("uuid4", "uuid"),)),
    ("Barcode", (_entry("ean13", "barcode"),)),
    (
        "Miscellaneous",
        (
            _entry("boolean", "boolean"),
            _entry("md5", "md5"),
            _entry("sha1", "sha1"),
            _entry("sha256", "sha256"),
            _entry("locale", "locale"),
            _entry("country_code", "countryCode"),
            _entry("language_code", "languageCode"),
            _entry("currency_code", "currencyCode"),
            _entry("emoji", "emoji"),
        ),
    ),
    ("Html", (_entry("paragraph", "randomHtml", "html"),)),
)

# Default generator per primitive kind
BASE_PROVIDERS: dict[PrimitiveKind, str] = {
    PrimitiveKind.BOOL: "boolean",
    PrimitiveKind.INT: "random_digit_not_null",
    PrimitiveKind.FLOAT: "pyfloat",
    PrimitiveKind.STRING: "word",
    PrimitiveKind.MIXED: "word",
    PrimitiveKind.ARRAY: "words",
}


def normalize(value: Any) -> Any:
    """Convert Faker results into plain literal values."""
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, tuple):
        return [normalize(item) for item in value]
    if isinstance(value, list):
        return [normalize(item) for item in value]
    if isinstance(value, dict):
        return {key: normalize(item) for key, item in value.items()}
    return value


class FakeDataSynthesizer:
    """Produce representative literal values by name or by type."""

    def __init__(
        self,
        faker: Faker | None = None,
        seed: int | None = None,
        locale: str = "en_US",
    ) -> None:
        self.faker = faker or Faker(locale)
        if seed is not None:
            self.faker.seed_instance(seed)

    def generate(self, method: str) -> Any:
        """Invoke one Faker generator by method name."""
        return normalize(getattr(self.faker, method)())

    def match_name(self, name: str) -> tuple[str, FakeProvider] | None:
        """Find the first catalog entry whose pattern occurs in ``name``."""
        lowered = name.lower()
        for category, providers in FAKE_CATALOG:
            for provider in providers:
                for pattern in provider.patterns:
                    if pattern.lower() in lowered:
                        return category, provider
        return None

    def value_for_name(self, name: str) -> Any | None:
        """Value from the first matching catalog entry, None without a match."""
        if not name:
            return None
        match = self.match_name(name)
        if match is None:
            return None
        category, provider = match
        logger.debug("fake_value_by_name", name=name, category=category, method=provider.method)
        return self.generate(provider.method)

    def value_for_type(self, resolved: ResolvedType) -> Any | None:
        """Default value for a primitive kind (or a list of one for typed arrays)."""
        if isinstance(resolved, ArrayOf):
            element = self.value_for_type(resolved.element)
            return None if element is None else [element]
        if isinstance(resolved, Primitive):
            method = BASE_PROVIDERS.get(resolved.kind)
            return self.generate(method) if method else None
        return None

    def value(self, name: str, resolved: ResolvedType) -> Any | None:
        """Name lookup first, type lookup second."""
        value = self.value_for_name(name)
        if value is None:
            value = self.value_for_type(resolved)
        return value


__all__ = ["FakeDataSynthesizer", "FakeProvider", "FAKE_CATALOG", "BASE_PROVIDERS", "normalize"]
