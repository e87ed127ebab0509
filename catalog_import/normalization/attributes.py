"""
Product attribute normalization.

Feeds mix Russian and Ukrainian spellings for the same characteristic, so
parameter names and values are mapped onto the storefront's Ukrainian
filter vocabulary before they are stored in products.attributes.
"""
import logging
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Union

logger = logging.getLogger(__name__)

AttributeValue = Union[str, List[str]]

MULTI_VALUE_DELIMITER = "|"
BRAND_ATTRIBUTE = "Бренд"
COUNTRY_ATTRIBUTE = "Країна виробник"

ATTR_KEYS_MAP: Dict[str, str] = {
    # General
    'Пол': 'Стать',
    'Объем': "Об'єм",
    'Об`єм': "Об'єм",
    'Возраст': 'Вік',
    'Возрастная группа': 'Вік',
    'Вікова група': 'Вік',
    # Skin
    'Тип кожи': 'Тип шкіри',
    'Проблема кожи': 'Проблема шкіри',
    'Проблема і стан шкіри': 'Проблема шкіри',
    'Состояние кожи': 'Стан шкіри',
    # Product
    'Назначение и результат': 'Призначення',
    'Призначення і результат': 'Призначення',
    'Действие': 'Дія',
    'Классификация косметического средства': 'Клас косметики',
    'Класифікація косметичного засобу': 'Клас косметики',
    'Вид маски по консистенції': 'Консистенція',
    'Вид маски за призначенням': 'Вид маски',
    'Время применения': 'Час застосування',
    'Тип крема': 'Тип крему',
    'Некомедогенно': 'Некомедогенний',
    'Гипоаллергенно': 'Гіпоалергенний',
    # Manufacturer
    'Страна производитель': COUNTRY_ATTRIBUTE,
    'Країна Виробника': COUNTRY_ATTRIBUTE,
    # Other
    'Количество в упаковке': 'Кількість в упаковці',
    'Цвет': 'Колір',
    'Дополнительный эффект': 'Додатковий ефект',
    'Область применения': 'Область застосування',
}

ATTR_VALUES_MAP: Dict[str, str] = {
    'Да': 'Так',
    'Нет': 'Ні',
    'true': 'Так',
    'false': 'Ні',
    'Унисекс': 'Унісекс',
    'Женский': 'Жіночий',
    'Мужской': 'Чоловічий',
    'Все типы кожи': 'Всі типи шкіри',
    'Жирная': 'Жирна',
    'Сухая': 'Суха',
    'Комбинированная (Смешанная)': 'Комбінована',
    'Чувствительная': 'Чутлива',
    'Нормальная': 'Нормальна',
    'Проблемная': 'Проблемна',
    'Увядающая (зрелая)': 'Зріла',
    'Универсальный': 'Універсальний',
    'Дневной': 'Денний',
    'Ночной': 'Нічний',
    'Профессиональная': 'Професійна',
    'Масс маркет': 'Мас-маркет',
    'Аптечная': 'Аптечна',
    'Натуральная': 'Натуральна',
    'Органическая': 'Органічна',
    'Италия': 'Італія',
    'Франция': 'Франція',
    'Испания': 'Іспанія',
    'Израиль': 'Ізраїль',
    'Украина': 'Україна',
}


class AttributePair(NamedTuple):
    """One raw parameter after the input shape has been resolved"""
    name: str
    value: Any
    unit: Optional[str] = None


def _unwrap(value: Any) -> Any:
    """Reduce {"#text": x} / {"value": x} wrappers to x."""
    if isinstance(value, dict):
        if value.get('#text') is not None:
            return value['#text']
        return value.get('value')
    return value


def _is_pair(item: Dict[str, Any]) -> bool:
    return '@name' in item or ('name' in item and ('value' in item or '#text' in item))


def _pair_from_dict(item: Dict[str, Any]) -> Optional[AttributePair]:
    name = item.get('@name') or item.get('name')
    if not isinstance(name, str) or not name.strip():
        return None
    unit = item.get('@unit') or item.get('unit')
    return AttributePair(name.strip(), _unwrap(item), unit.strip() if isinstance(unit, str) and unit.strip() else None)


def flatten_params(raw: Any) -> List[AttributePair]:
    """
    Resolve any accepted parameter shape into a list of AttributePair.

    Accepted shapes:
        - list of {"name"/"@name": ..., "value"/"#text": ..., "unit"/"@unit": ...}
        - mapping of name -> value, where value may be wrapped or a list
        - a single {"@name": ..., "#text": ...} dict
    """
    if raw is None:
        return []

    if isinstance(raw, dict):
        if _is_pair(raw):
            pair = _pair_from_dict(raw)
            return [pair] if pair else []
        return [
            AttributePair(str(name).strip(), _unwrap(value))
            for name, value in raw.items()
            if str(name).strip()
        ]

    if isinstance(raw, list):
        pairs = []
        for item in raw:
            if not isinstance(item, dict):
                logger.debug(f"Skipping param without a name: {item!r}")
                continue
            pair = _pair_from_dict(item)
            if pair:
                pairs.append(pair)
        return pairs

    logger.warning(f"Unsupported param collection type: {type(raw).__name__}")
    return []


def translate_key(name: str) -> str:
    name = name.strip()
    return ATTR_KEYS_MAP.get(name, name)


def translate_value(value: str) -> str:
    value = value.strip()
    return ATTR_VALUES_MAP.get(value, value)


def _scalar_text(value: Any) -> Optional[str]:
    value = _unwrap(value)
    if value is None:
        return None
    if isinstance(value, bool):
        value = 'true' if value else 'false'
    text = str(value).strip()
    return text or None


def _segments(values: Iterable[Any]) -> List[str]:
    result = []
    for value in values:
        text = _scalar_text(value)
        if text is None:
            continue
        for segment in text.split(MULTI_VALUE_DELIMITER):
            segment = translate_value(segment)
            if segment:
                result.append(segment)
    return result


def normalize_value(value: Any, unit: Optional[str] = None) -> Optional[AttributeValue]:
    """
    Translate a raw value. Pipe-delimited strings and lists become lists.

    Returns None for empty values.
    """
    if isinstance(value, list):
        normalized: Optional[AttributeValue] = _segments(value) or None
    else:
        text = _scalar_text(value)
        if text is None:
            return None
        if MULTI_VALUE_DELIMITER in text:
            normalized = _segments([text]) or None
        else:
            normalized = translate_value(text)

    if normalized is not None and unit:
        if isinstance(normalized, list):
            normalized = [f"{segment} {unit}" for segment in normalized]
        else:
            normalized = f"{normalized} {unit}"
    return normalized


def _merge(existing: AttributeValue, value: AttributeValue) -> List[str]:
    merged = list(existing) if isinstance(existing, list) else [existing]
    merged.extend(value if isinstance(value, list) else [value])
    return merged


def normalize_attributes(
    raw_params: Any,
    vendor: Optional[str] = None,
    country_of_origin: Optional[str] = None,
) -> Dict[str, AttributeValue]:
    """
    Build the canonical attribute map for one product.

    Repeated keys accumulate into one flat list. The vendor, when given,
    is stored under the brand attribute for storefront filtering.
    """
    normalized: Dict[str, AttributeValue] = {}

    for pair in flatten_params(raw_params):
        value = normalize_value(pair.value, pair.unit)
        if value is None:
            continue

        key = translate_key(pair.name)
        if key in normalized:
            normalized[key] = _merge(normalized[key], value)
        else:
            normalized[key] = value

    if country_of_origin and country_of_origin.strip() and COUNTRY_ATTRIBUTE not in normalized:
        normalized[COUNTRY_ATTRIBUTE] = translate_value(country_of_origin)

    if vendor and vendor.strip():
        normalized[BRAND_ATTRIBUTE] = vendor.strip()

    return normalized
