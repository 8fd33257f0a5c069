"""Store contact configuration.

A small JSON blob with WhatsApp numbers and social links, read once at
start-up. There is no schema versioning; unknown keys are ignored.
"""

import json
from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = structlog.get_logger()


class StoreCredentials(BaseModel):
    """Contact numbers and social links for the store."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    whatsapp_retail: str | None = Field(default=None, alias="whatsapp_varejo")
    whatsapp_reseller: str | None = Field(default=None, alias="whatsapp_revenda")
    instagram: str | None = None
    facebook: str | None = None
    twitter: str | None = None
    website: str | None = None

    def social_links(self) -> dict[str, str]:
        """Configured social links keyed by network."""
        links = {
            "instagram": self.instagram,
            "facebook": self.facebook,
            "twitter": self.twitter,
            "website": self.website,
        }
        return {name: url for name, url in links.items() if url}


def load_store_credentials(path: str | Path) -> StoreCredentials:
    """Read the store configuration file.

    A missing, unreadable or malformed file is logged and yields an empty
    configuration; contact actions then report the missing number.

    Args:
        path: Location of the JSON file.

    Returns:
        Parsed credentials (possibly empty).
    """
    file_path = Path(path)
    if not file_path.exists():
        logger.info("Store credentials file not found", path=str(file_path))
        return StoreCredentials()

    try:
        raw = json.loads(file_path.read_text(encoding="utf-8"))
        credentials = StoreCredentials.model_validate(raw)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.error(
            "Failed to load store credentials",
            path=str(file_path),
            error=str(e),
        )
        return StoreCredentials()

    logger.info(
        "Store credentials loaded",
        path=str(file_path),
        has_retail_number=bool(credentials.whatsapp_retail),
        has_reseller_number=bool(credentials.whatsapp_reseller),
    )
    return credentials
