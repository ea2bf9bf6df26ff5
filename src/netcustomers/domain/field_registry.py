"""
Built-in Field Registry.

The default customer schema created on first run. Every installation
starts from this set; technicians then add, reorder and remove the
non-required fields through the Schema Registry.

The three identity fields (serial number, location, name) are required
and can never be removed.
"""

from __future__ import annotations

from netcustomers.domain.models import FieldDefinition, FieldType


# ═══════════════════════════════════════════════════════════════════════════
# DEFAULT FIELDS
# ═══════════════════════════════════════════════════════════════════════════

DEFAULT_FIELDS: list[FieldDefinition] = []


def _register(
    key: str,
    label_primary: str,
    label_secondary: str,
    field_type: FieldType = FieldType.TEXT,
    required: bool = False,
) -> FieldDefinition:
    """Register a default field with the next id/order and return it."""
    position = len(DEFAULT_FIELDS) + 1
    definition = FieldDefinition(
        id=str(position),
        key=key,
        label_primary=label_primary,
        label_secondary=label_secondary,
        type=field_type,
        required=required,
        order=position,
    )
    DEFAULT_FIELDS.append(definition)
    return definition


# ─────────────────────────────────────────────────────────────────────────────
# Identity (required)
# ─────────────────────────────────────────────────────────────────────────────

SERIAL_NUMBER = _register("serialNumber", "رقم تسلسلي", "Serial Number", required=True)
LOCATION = _register("location", "الموقع", "Location", required=True)
NAME = _register("name", "الاسم", "Name", required=True)

# ─────────────────────────────────────────────────────────────────────────────
# Subscription details
# ─────────────────────────────────────────────────────────────────────────────

POINT_NAME = _register("pointName", "اسم النقطة", "Point Name")
NETWORK_NAME = _register("networkName", "اسم الشبكة", "Network Name")
NETWORK_PASSWORD = _register(
    "networkPassword", "كلمة مرور الشبكة", "Network Password", FieldType.PASSWORD
)
USERNAME = _register("username", "اسم المستخدم", "Username")
USER_PASSWORD = _register("userPassword", "كلمة المرور", "Password", FieldType.PASSWORD)
IP_ADDRESS = _register("ipAddress", "عنوان IP", "IP Address", FieldType.IP)
GATEWAY_IP = _register("gatewayIp", "IP Gateway", "IP Gateway", FieldType.IP)
PACKAGE_SPEED = _register("packageSpeed", "سرعة الباقة", "Package Speed")
PACKAGE_SIZE = _register("packageSize", "حجم الباقة", "Package Size")


IDENTITY_KEYS: tuple[str, ...] = tuple(f.key for f in DEFAULT_FIELDS if f.required)

# Keys the record search looks at
SEARCH_KEYS: tuple[str, ...] = (NAME.key, SERIAL_NUMBER.key, LOCATION.key, IP_ADDRESS.key)


def default_fields() -> list[FieldDefinition]:
    """Fresh, mutable copies of the default field set."""
    return [definition.copy() for definition in DEFAULT_FIELDS]


__all__ = [
    "DEFAULT_FIELDS",
    "IDENTITY_KEYS",
    "SEARCH_KEYS",
    "default_fields",
]
