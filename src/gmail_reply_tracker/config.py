"""Static run configuration, loaded from a JSON file."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .constants import (
    BASE_LABEL,
    CONFIG_PATH,
    DEFAULT_LABEL_COLOR,
    DEFAULT_RULE_NAME,
    DEFAULT_RULE_PRIORITY,
    DEFAULT_RULE_QUERY,
    DEFAULT_SHEET_NAME,
    DEFAULT_TIME_RANGE,
    DEFAULT_TIMEZONE,
    FREQUENT_LABEL,
    FREQUENT_REPLY_THRESHOLD,
    MAX_PAGES,
    PAGE_SIZE,
    PROCESSED_IDS_CAP,
    REPLY_COUNT_HARD,
    REPLY_COUNT_MID,
    REPLY_COUNT_SOFT,
    SNIPPET_LENGTH,
)
from .exceptions import ConfigError
from .models import ActionKind, Rule

logger = logging.getLogger(__name__)

DEFAULT_RULE_TEMPLATE = DEFAULT_RULE_QUERY + " deliveredto:{target_address}"


@dataclass(frozen=True)
class ReplyCountThresholds:
    """Inclusive reply-count thresholds for the three highlight tiers."""

    soft: int = REPLY_COUNT_SOFT
    mid: int = REPLY_COUNT_MID
    hard: int = REPLY_COUNT_HARD


@dataclass(frozen=True)
class TrackerConfig:
    """Everything a run needs besides credentials."""

    spreadsheet_id: str
    sheet_name: str = DEFAULT_SHEET_NAME
    target_address: str = ""
    time_range: str = DEFAULT_TIME_RANGE
    page_size: int = PAGE_SIZE
    max_pages: int = MAX_PAGES
    snippet_length: int = SNIPPET_LENGTH
    thresholds: ReplyCountThresholds = field(default_factory=ReplyCountThresholds)
    timezone: str = DEFAULT_TIMEZONE
    base_label: str = BASE_LABEL
    frequent_label: str = FREQUENT_LABEL
    frequent_reply_threshold: int = FREQUENT_REPLY_THRESHOLD
    processed_ids_cap: int = PROCESSED_IDS_CAP
    rules: tuple[Rule, ...] = ()

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


def parse_action(value: str | None) -> ActionKind:
    """Map an action name to its ActionKind; unknown names become no-ops."""
    if not value:
        return ActionKind.NONE
    try:
        return ActionKind(value.upper())
    except ValueError:
        logger.warning("Unknown rule action %r, treating it as a no-op", value)
        return ActionKind.NONE


def render_query(template: str, time_range: str, target_address: str) -> str:
    """Fill {time_range} / {target_address} placeholders of a rule query.

    Plain replacement rather than str.format: Gmail queries use braces for
    OR groups.  Without a target address the deliveredto: term is dropped.
    """
    if not target_address:
        template = template.replace("deliveredto:{target_address}", "")
    query = template.replace("{time_range}", time_range).replace("{target_address}", target_address)
    return " ".join(query.split())


def default_rules(time_range: str, target_address: str) -> tuple[Rule, ...]:
    """The stock rule: unread "Re:" replies delivered to the target address."""
    query = render_query(DEFAULT_RULE_TEMPLATE, time_range, target_address)
    return (
        Rule(
            name=DEFAULT_RULE_NAME,
            query=query,
            priority=DEFAULT_RULE_PRIORITY,
            action=ActionKind.TRACK_REPLY,
            label_color=DEFAULT_LABEL_COLOR,
        ),
    )


def _positive_int(data: dict, key: str, default: int) -> int:
    value = data.get(key, default)
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise ConfigError(f"'{key}' must be a positive integer, got {value!r}")
    return value


def config_from_dict(data: dict) -> TrackerConfig:
    """Build a TrackerConfig from parsed JSON, applying defaults."""
    if not isinstance(data, dict):
        raise ConfigError("Config must be a JSON object")

    spreadsheet_id = data.get("spreadsheet_id")
    if not spreadsheet_id:
        raise ConfigError("'spreadsheet_id' is required")

    timezone = data.get("timezone", DEFAULT_TIMEZONE)
    try:
        ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"Unknown timezone {timezone!r}") from e

    time_range = data.get("time_range", DEFAULT_TIME_RANGE)
    target_address = data.get("target_address", "")

    warn = data.get("reply_count_thresholds", {})
    if not isinstance(warn, dict):
        raise ConfigError(f"'reply_count_thresholds' must be an object, got {warn!r}")
    thresholds = ReplyCountThresholds(
        soft=_positive_int(warn, "soft", REPLY_COUNT_SOFT),
        mid=_positive_int(warn, "mid", REPLY_COUNT_MID),
        hard=_positive_int(warn, "hard", REPLY_COUNT_HARD),
    )
    if not thresholds.soft <= thresholds.mid <= thresholds.hard:
        raise ConfigError(
            "'reply_count_thresholds' must satisfy soft <= mid <= hard, got "
            f"{thresholds.soft}/{thresholds.mid}/{thresholds.hard}"
        )

    raw_rules = data.get("rules")
    if raw_rules:
        try:
            rules = tuple(
                Rule(
                    name=r["name"],
                    query=render_query(r["query"], time_range, target_address),
                    priority=r.get("priority", DEFAULT_RULE_PRIORITY),
                    action=parse_action(r.get("action")),
                    label_color=r.get("label_color", DEFAULT_LABEL_COLOR),
                )
                for r in raw_rules
            )
        except (KeyError, TypeError) as e:
            raise ConfigError(f"Invalid rule definition: {e}") from e
    else:
        rules = default_rules(time_range, target_address)

    return TrackerConfig(
        spreadsheet_id=spreadsheet_id,
        sheet_name=data.get("sheet_name", DEFAULT_SHEET_NAME),
        target_address=target_address,
        time_range=time_range,
        page_size=_positive_int(data, "page_size", PAGE_SIZE),
        max_pages=_positive_int(data, "max_pages", MAX_PAGES),
        snippet_length=_positive_int(data, "snippet_length", SNIPPET_LENGTH),
        thresholds=thresholds,
        timezone=timezone,
        base_label=data.get("base_label", BASE_LABEL),
        frequent_label=data.get("frequent_label", FREQUENT_LABEL),
        frequent_reply_threshold=_positive_int(
            data, "frequent_reply_threshold", FREQUENT_REPLY_THRESHOLD
        ),
        processed_ids_cap=_positive_int(data, "processed_ids_cap", PROCESSED_IDS_CAP),
        rules=rules,
    )


def load_config(path: Path | None = None) -> TrackerConfig:
    """Load the tracker config from a JSON file (default: CONFIG_PATH)."""
    path = Path(path or CONFIG_PATH)
    if not path.exists():
        raise ConfigError(
            f"Config file not found at {path}.\n"
            "Run 'gmail-reply-tracker init' and fill in your spreadsheet ID."
        )
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config file {path} is not valid JSON: {e}") from e
    return config_from_dict(data)


def config_template() -> dict:
    """Return a starter config with every supported key."""
    return {
        "spreadsheet_id": "",
        "sheet_name": DEFAULT_SHEET_NAME,
        "target_address": "",
        "time_range": DEFAULT_TIME_RANGE,
        "page_size": PAGE_SIZE,
        "max_pages": MAX_PAGES,
        "snippet_length": SNIPPET_LENGTH,
        "reply_count_thresholds": {
            "soft": REPLY_COUNT_SOFT,
            "mid": REPLY_COUNT_MID,
            "hard": REPLY_COUNT_HARD,
        },
        "timezone": DEFAULT_TIMEZONE,
        "base_label": BASE_LABEL,
        "frequent_label": FREQUENT_LABEL,
        "frequent_reply_threshold": FREQUENT_REPLY_THRESHOLD,
        "processed_ids_cap": PROCESSED_IDS_CAP,
        "rules": [
            {
                "name": DEFAULT_RULE_NAME,
                "query": DEFAULT_RULE_TEMPLATE,
                "priority": DEFAULT_RULE_PRIORITY,
                "action": ActionKind.TRACK_REPLY.value,
                "label_color": DEFAULT_LABEL_COLOR,
            }
        ],
    }


def write_config_template(path: Path | None = None, force: bool = False) -> Path:
    """Write config_template() to path. Refuses to overwrite unless force is set."""
    path = Path(path or CONFIG_PATH)
    if path.exists() and not force:
        raise ConfigError(f"Config file already exists at {path} (use --force to overwrite)")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config_template(), indent=2, ensure_ascii=False), encoding="utf-8")
    return path
