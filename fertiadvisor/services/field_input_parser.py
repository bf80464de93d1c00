"""
Parse raw field form data into a FieldInput.

Form values arrive as numeric strings or numbers under the form's camelCase
keys. A missing or unparsable number fails the whole request; nothing is
silently replaced with zero.
"""
from typing import Any, Mapping, Optional
import logging
import math

from fertiadvisor.services.recommendation_engine import FieldInput, InvalidInput

logger = logging.getLogger(__name__)

SIZE_UNITS = ("hectares", "acres", "bigha")
DEFAULT_SIZE_UNIT = "hectares"


def parse_number(raw: Mapping[str, Any], key: str) -> float:
    """
    Parse a finite float from raw[key].

    Raises:
        InvalidInput: if the key is missing, empty, not numeric, or not finite.
    """
    value = raw.get(key)
    if value is None or isinstance(value, bool):
        raise InvalidInput(key, "a numeric value is required")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise InvalidInput(key, "a numeric value is required")
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidInput(key, f"'{value}' is not a number")
    if not math.isfinite(number):
        raise InvalidInput(key, f"'{value}' is not a finite number")
    return number


def parse_code(raw: Mapping[str, Any], key: str) -> int:
    """Parse an integer category code (crop or soil type)."""
    number = parse_number(raw, key)
    if not number.is_integer():
        raise InvalidInput(key, f"'{raw.get(key)}' is not an integer code")
    return int(number)


def parse_size_unit(raw: Mapping[str, Any]) -> str:
    """
    Read the size unit. Unknown units are kept as given; the engine
    treats them as hectares.
    """
    unit = raw.get("sizeUnit")
    if unit is None or (isinstance(unit, str) and not unit.strip()):
        return DEFAULT_SIZE_UNIT
    unit = str(unit).strip().lower()
    if unit not in SIZE_UNITS:
        logger.debug(f"Unrecognized size unit '{unit}'")
    return unit


def parse_field_input(raw: Mapping[str, Any]) -> FieldInput:
    """
    Build a FieldInput from form data.

    Args:
        raw: Mapping with keys fieldSize, sizeUnit, cropType, soilType, soilPH,
            nitrogen, phosphorus, potassium, temperature, humidity,
            soilMoisture and optionally fieldName.

    Returns:
        Parsed FieldInput.

    Raises:
        InvalidInput: on the first field that fails to parse, or if the
            field size is not positive.
    """
    field_size = parse_number(raw, "fieldSize")
    if field_size <= 0:
        raise InvalidInput("fieldSize", f"must be positive, got {field_size}")

    field_name: Optional[str] = raw.get("fieldName")
    if field_name is not None:
        field_name = str(field_name).strip() or None

    return FieldInput(
        field_size=field_size,
        size_unit=parse_size_unit(raw),
        crop_type=parse_code(raw, "cropType"),
        soil_type=parse_code(raw, "soilType"),
        soil_ph=parse_number(raw, "soilPH"),
        nitrogen=parse_number(raw, "nitrogen"),
        phosphorus=parse_number(raw, "phosphorus"),
        potassium=parse_number(raw, "potassium"),
        temperature=parse_number(raw, "temperature"),
        humidity=parse_number(raw, "humidity"),
        soil_moisture=parse_number(raw, "soilMoisture"),
        field_name=field_name,
    )
