"""
Display-name helpers for setting definition ids and attribute paths.
"""
import re

VENDOR_PREFIX_PATTERN = re.compile(r"^(device_vendor_msft_|user_vendor_msft_|vendor_msft_)", re.IGNORECASE)
CAMEL_BOUNDARY_PATTERN = re.compile(r"([a-z])([A-Z])")


def _capitalize(part: str) -> str:
    return part[:1].upper() + part[1:]


def humanize_definition_id(definition_id: str) -> str:
    """
    Derive a display name from a catalog setting definition id.

    Drops the catalog path and vendor prefixes, then title-cases the last
    one to three underscore-separated segments.

    Args:
        definition_id: e.g. "device_vendor_msft_policy_config_defender_allowarchivescanning"

    Returns:
        Display name, e.g. "Config > Defender > Allowarchivescanning"
    """
    name = definition_id.rsplit("~", 1)[-1]
    name = VENDOR_PREFIX_PATTERN.sub("", name)
    parts = [part for part in name.split("_") if part]
    if not parts:
        return definition_id
    if len(parts) <= 2:
        return "".join(_capitalize(part) for part in parts)
    return " > ".join(_capitalize(part) for part in parts[-3:])


def humanize_template_setting(definition_id: str) -> str:
    """Display name for a security-template setting: last segment, camel case split."""
    last = definition_id.rsplit("_", 1)[-1]
    spaced = CAMEL_BOUNDARY_PATTERN.sub(r"\1 \2", last)
    return " ".join(_capitalize(word) for word in spaced.split(" ") if word) or definition_id


def humanize_path(path: str) -> str:
    """Display name for a dotted attribute path: "a.bC[0].d" -> "A > BC[0] > D"."""
    return " > ".join(_capitalize(part) for part in path.split("."))


def humanize_choice_option(option: str) -> str:
    """Display text for a catalog choice option token."""
    if option == "1":
        return "Enabled"
    if option == "0":
        return "Disabled"
    words = [word for word in option.replace("_", " ").split(" ") if word]
    return " ".join(_capitalize(word) for word in words)
