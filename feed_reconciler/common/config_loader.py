"""
Configuration Loader

Loads the YAML run configuration (store API, size templates, partners,
cohort sheet settings) and merges in secrets from the environment.
Everything is resolved once at startup into a single ReconcilerConfig.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

CONFIG_FILENAME = 'reconciler.yaml'

PARTNER_STORE = 'partner_store'
SUPPLIER_FEED = 'supplier_feed'


def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file from the config directory.

    Args:
        filename: Name of the config file (e.g., 'reconciler.yaml')

    Returns:
        Parsed YAML content as dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


@dataclass(frozen=True)
class PartnerConfig:
    """One partner source and how its export is reconciled."""
    name: str
    kind: str
    label: str = ""
    auth_token: str = ""
    feed_url: str = ""
    match_by: str = "slug"
    rehost_images: bool = False
    carry_over_outdated: bool = False
    markup: int = 0
    size_translation: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if self.kind not in (PARTNER_STORE, SUPPLIER_FEED):
            raise ValueError(f"Unknown partner kind for {self.name}: {self.kind}")
        if self.match_by not in ("slug", "name"):
            raise ValueError(f"Partner {self.name}: match_by must be 'slug' or 'name'")

    @property
    def display_name(self) -> str:
        return self.label or self.name


@dataclass(frozen=True)
class SheetSettings:
    """Location of the cohort table inside the spreadsheet."""
    sheet_id: str = ""
    tab_name: str = "Users"
    start_range: str = "A2"
    end_range: str = "G"

    @property
    def read_range(self) -> str:
        return f"{self.tab_name}!{self.start_range}:{self.end_range}"

    @property
    def first_row(self) -> int:
        digits = ''.join(ch for ch in self.start_range if ch.isdigit())
        return int(digits) if digits else 1

    def write_range(self, row_count: int) -> str:
        """Range covering exactly row_count rows from the start cell."""
        last_row = self.first_row + max(row_count, 1) - 1
        return f"{self.tab_name}!{self.start_range}:{self.end_range}{last_row}"


@dataclass(frozen=True)
class ReconcilerConfig:
    """Run-wide settings passed explicitly to every component."""

    # Stores API
    store_api_url: str = "https://www.wixapis.com"
    store_auth_token: str = ""
    page_size: int = 100
    concurrency: int = 4
    size_option_name: str = "Размер"
    size_option_type: str = "DROP_DOWN"
    handle_prefix: str = "Product_"
    list_separator: str = ";"

    # Size filter tags
    number_placeholder: str = "100"
    string_placeholder: str = "XXX"
    category_templates: Dict[str, str] = field(default_factory=dict)

    # Image hosting
    image_host_base: str = ""
    image_bucket: str = ""

    partners: Dict[str, PartnerConfig] = field(default_factory=dict)

    # Cohort sheet
    sheet: SheetSettings = field(default_factory=SheetSettings)
    default_cohort: str = ""
    unsubscribed_marker: str = "отписан"
    unsubscribed_users_file: str = "data/unsubscribed_users.txt"
    google_credentials_file: str = ""

    # Notification
    slack_token: str = ""
    slack_channel: str = ""

    def get_partner(self, name: str) -> PartnerConfig:
        try:
            return self.partners[name]
        except KeyError:
            known = ', '.join(sorted(self.partners)) or 'none'
            raise ValueError(f"Unknown partner: {name}. Configured: {known}") from None


def build_category_templates(categories: Dict[str, str], number_placeholder: str,
                             string_placeholder: str) -> Dict[str, str]:
    """
    Expand {number}/{string} tokens in category size templates.

    Example:
        {'Для женщин': '{number}F'} -> {'Для женщин': '100F'}
    """
    return {
        category: template.format(number=number_placeholder, string=string_placeholder)
        for category, template in categories.items()
    }


def _build_partner(name: str, raw: Dict[str, Any]) -> PartnerConfig:
    token_env = raw.get('token_env', '')
    return PartnerConfig(
        name=name,
        kind=raw.get('kind', ''),
        label=raw.get('label', ''),
        auth_token=os.environ.get(token_env, '') if token_env else '',
        feed_url=raw.get('feed_url', ''),
        match_by=raw.get('match_by', 'slug'),
        rehost_images=bool(raw.get('rehost_images', False)),
        carry_over_outdated=bool(raw.get('carry_over_outdated', False)),
        markup=int(raw.get('markup', 0)),
        size_translation={str(k): str(v) for k, v in (raw.get('size_translation') or {}).items()},
    )


def load_reconciler_config(config_path: Optional[str] = None) -> ReconcilerConfig:
    """
    Load the run configuration.

    Non-secret settings come from config/reconciler.yaml (or config_path);
    tokens and credential paths come from the environment, after loading a
    .env file if one exists.

    Args:
        config_path: Explicit YAML path (defaults to the repo config directory)

    Returns:
        Frozen ReconcilerConfig
    """
    load_dotenv()

    if config_path:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    else:
        data = load_config(CONFIG_FILENAME)

    store = data.get('store', {})
    size_tags = data.get('size_tags', {})
    images = data.get('images', {})
    cohorts = data.get('cohorts', {})
    notify = data.get('notify', {})

    number_placeholder = str(size_tags.get('number_placeholder', '100'))
    string_placeholder = str(size_tags.get('string_placeholder', 'XXX'))

    partners = {
        name: _build_partner(name, raw or {})
        for name, raw in (data.get('partners') or {}).items()
    }

    sheet = SheetSettings(
        sheet_id=cohorts.get('sheet_id', ''),
        tab_name=cohorts.get('tab_name', 'Users'),
        start_range=cohorts.get('start_range', 'A2'),
        end_range=cohorts.get('end_range', 'G'),
    )

    return ReconcilerConfig(
        store_api_url=store.get('api_url', 'https://www.wixapis.com').rstrip('/'),
        store_auth_token=os.environ.get('STORE_AUTH_TOKEN', ''),
        page_size=int(store.get('page_size', 100)),
        concurrency=int(store.get('concurrency', 4)),
        size_option_name=store.get('size_option_name', 'Размер'),
        size_option_type=store.get('size_option_type', 'DROP_DOWN'),
        handle_prefix=store.get('handle_prefix', 'Product_'),
        list_separator=store.get('list_separator', ';'),
        number_placeholder=number_placeholder,
        string_placeholder=string_placeholder,
        category_templates=build_category_templates(
            size_tags.get('categories') or {}, number_placeholder, string_placeholder
        ),
        image_host_base=images.get('host_base', '').rstrip('/'),
        image_bucket=images.get('bucket', ''),
        partners=partners,
        sheet=sheet,
        default_cohort=cohorts.get('default_cohort', ''),
        unsubscribed_marker=cohorts.get('unsubscribed_marker', 'отписан'),
        unsubscribed_users_file=cohorts.get('unsubscribed_users_file', 'data/unsubscribed_users.txt'),
        google_credentials_file=os.environ.get('GOOGLE_APPLICATION_CREDENTIALS', ''),
        slack_token=os.environ.get('SLACK_BOT_TOKEN', ''),
        slack_channel=notify.get('slack_channel', ''),
    )
