import random
import re

MAX_SLUG_LENGTH = 100

# Russian and Ukrainian lowercase letters; anything else passes through
CYRILLIC_TO_LATIN = {
    'а': 'a', 'б': 'b', 'в': 'v', 'г': 'g', 'д': 'd', 'е': 'e', 'ё': 'yo', 'ж': 'zh',
    'з': 'z', 'и': 'i', 'й': 'y', 'к': 'k', 'л': 'l', 'м': 'm', 'н': 'n', 'о': 'o',
    'п': 'p', 'р': 'r', 'с': 's', 'т': 't', 'у': 'u', 'ф': 'f', 'х': 'h', 'ц': 'ts',
    'ч': 'ch', 'ш': 'sh', 'щ': 'sch', 'ъ': '', 'ы': 'y', 'ь': '', 'э': 'e', 'ю': 'yu',
    'я': 'ya', 'і': 'i', 'ї': 'yi', 'є': 'ye', 'ґ': 'g',
}

_NON_SLUG_CHARS = re.compile(r'[^a-z0-9]+')


def transliterate(text: str) -> str:
    """Lower-case text and replace Cyrillic letters with Latin ones."""
    if not text:
        return ''
    return ''.join(CYRILLIC_TO_LATIN.get(char, char) for char in text.lower())


def fallback_slug() -> str:
    """Slug for names that produce nothing usable; not guaranteed unique."""
    return f"item-{random.randint(0, 99999)}"


def generate_slug(text: str) -> str:
    """
    Build a URL-safe slug from a display name.

    >>> generate_slug("Крем для обличчя")
    'krem-dlya-oblichchya'
    """
    if not text:
        return fallback_slug()

    slug = _NON_SLUG_CHARS.sub('-', transliterate(text)).strip('-')
    slug = slug[:MAX_SLUG_LENGTH].rstrip('-')
    return slug or fallback_slug()


def suffixed_slug(text: str, suffix) -> str:
    """Slug with a disambiguating suffix, e.g. an external id."""
    suffix = _NON_SLUG_CHARS.sub('-', str(suffix).lower()).strip('-')
    if not suffix:
        return generate_slug(text)
    return f"{generate_slug(text)}-{suffix}"
