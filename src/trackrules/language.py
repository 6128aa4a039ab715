"""Language token normalization.

User-entered language preferences and the language tags carried by media
streams arrive in many shapes: full names ("English"), ISO 639-1 codes
("en"), ISO 639-2 bibliographic or terminological codes ("ger", "deu") and
regional variants ("ptbr"). Every comparison made by the resolver happens on
the canonical 3-letter ISO 639-2/T form produced here.

The reserved keywords "any" and "none" normalize to themselves. No real
language code collides with either.

Normalization never fails: unrecognized tokens pass through lower-cased, so
ISO 639-3 codes and exotic tags still compare equal to themselves.
"""

from __future__ import annotations

from collections.abc import Iterable

from trackrules.domain.enums import ANY, NONE


# Aliases checked first (case-insensitive). Covers full names, 2-letter and
# 3-letter codes, and the regional variants users type into the rule editor.
_ALIASES: dict[str, str] = {
    "english": "eng",
    "eng": "eng",
    "en": "eng",
    "enus": "eng",
    "jp": "jpn",
    "jpn": "jpn",
    "japanese": "jpn",
    "ja": "jpn",
    "fr": "fra",
    "fra": "fra",
    "fre": "fra",
    "french": "fra",
    "es": "spa",
    "spa": "spa",
    "spanish": "spa",
    "latin spanish": "spa",
    "castilian": "spa",
    "de": "deu",
    "ger": "deu",
    "deu": "deu",
    "german": "deu",
    "it": "ita",
    "ita": "ita",
    "italian": "ita",
    "ko": "kor",
    "kor": "kor",
    "korean": "kor",
    "zh": "zho",
    "zho": "zho",
    "chi": "zho",
    "chinese": "zho",
    "pt": "por",
    "por": "por",
    "portuguese": "por",
    "br": "por",
    "pb": "por",
    "ptbr": "por",
    "ru": "rus",
    "rus": "rus",
    "russian": "rus",
    "pl": "pol",
    "pol": "pol",
    "polish": "pol",
    "sv": "swe",
    "swe": "swe",
    "swedish": "swe",
    NONE: NONE,
    ANY: ANY,
    "und": "und",
    "mul": "mul",
    # ISO 639-2/B codes whose 639-2/T form differs
    "alb": "sqi",
    "arm": "hye",
    "baq": "eus",
    "bur": "mya",
    "cze": "ces",
    "dut": "nld",
    "geo": "kat",
    "gre": "ell",
    "ice": "isl",
    "mac": "mkd",
    "mao": "mri",
    "may": "msa",
    "per": "fas",
    "rum": "ron",
    "slo": "slk",
    "tib": "bod",
    "wel": "cym",
    # Full names for the remaining common audio languages
    "arabic": "ara",
    "bulgarian": "bul",
    "croatian": "hrv",
    "czech": "ces",
    "danish": "dan",
    "dutch": "nld",
    "finnish": "fin",
    "greek": "ell",
    "hebrew": "heb",
    "hindi": "hin",
    "hungarian": "hun",
    "indonesian": "ind",
    "malay": "msa",
    "norwegian": "nor",
    "persian": "fas",
    "romanian": "ron",
    "serbian": "srp",
    "slovak": "slk",
    "tagalog": "tgl",
    "thai": "tha",
    "turkish": "tur",
    "ukrainian": "ukr",
    "vietnamese": "vie",
}

# ISO 639-1 to ISO 639-2/T. Only consulted for 2-letter tokens that are not
# aliases, so "br" stays Portuguese rather than Breton.
_ALPHA2_TO_ALPHA3: dict[str, str] = {
    "af": "afr",  # Afrikaans
    "am": "amh",  # Amharic
    "ar": "ara",  # Arabic
    "az": "aze",  # Azerbaijani
    "be": "bel",  # Belarusian
    "bg": "bul",  # Bulgarian
    "bn": "ben",  # Bengali
    "bo": "bod",  # Tibetan
    "bs": "bos",  # Bosnian
    "ca": "cat",  # Catalan
    "cs": "ces",  # Czech
    "cy": "cym",  # Welsh
    "da": "dan",  # Danish
    "de": "deu",  # German
    "el": "ell",  # Greek
    "en": "eng",  # English
    "eo": "epo",  # Esperanto
    "es": "spa",  # Spanish
    "et": "est",  # Estonian
    "eu": "eus",  # Basque
    "fa": "fas",  # Persian
    "fi": "fin",  # Finnish
    "fo": "fao",  # Faroese
    "fr": "fra",  # French
    "ga": "gle",  # Irish
    "gl": "glg",  # Galician
    "gu": "guj",  # Gujarati
    "he": "heb",  # Hebrew
    "hi": "hin",  # Hindi
    "hr": "hrv",  # Croatian
    "hu": "hun",  # Hungarian
    "hy": "hye",  # Armenian
    "id": "ind",  # Indonesian
    "is": "isl",  # Icelandic
    "it": "ita",  # Italian
    "ja": "jpn",  # Japanese
    "ka": "kat",  # Georgian
    "kk": "kaz",  # Kazakh
    "km": "khm",  # Khmer
    "kn": "kan",  # Kannada
    "ko": "kor",  # Korean
    "la": "lat",  # Latin
    "lo": "lao",  # Lao
    "lt": "lit",  # Lithuanian
    "lv": "lav",  # Latvian
    "mk": "mkd",  # Macedonian
    "ml": "mal",  # Malayalam
    "mn": "mon",  # Mongolian
    "mr": "mar",  # Marathi
    "ms": "msa",  # Malay
    "mt": "mlt",  # Maltese
    "my": "mya",  # Burmese
    "nb": "nob",  # Norwegian Bokmal
    "ne": "nep",  # Nepali
    "nl": "nld",  # Dutch
    "nn": "nno",  # Norwegian Nynorsk
    "no": "nor",  # Norwegian
    "pa": "pan",  # Punjabi
    "pl": "pol",  # Polish
    "ps": "pus",  # Pashto
    "pt": "por",  # Portuguese
    "ro": "ron",  # Romanian
    "ru": "rus",  # Russian
    "si": "sin",  # Sinhala
    "sk": "slk",  # Slovak
    "sl": "slv",  # Slovenian
    "so": "som",  # Somali
    "sq": "sqi",  # Albanian
    "sr": "srp",  # Serbian
    "sv": "swe",  # Swedish
    "sw": "swa",  # Swahili
    "ta": "tam",  # Tamil
    "te": "tel",  # Telugu
    "th": "tha",  # Thai
    "tl": "tgl",  # Tagalog
    "tr": "tur",  # Turkish
    "uk": "ukr",  # Ukrainian
    "ur": "urd",  # Urdu
    "uz": "uzb",  # Uzbek
    "vi": "vie",  # Vietnamese
    "yi": "yid",  # Yiddish
    "zh": "zho",  # Chinese
    "zu": "zul",  # Zulu
}


def normalize(token: str | None) -> str:
    """Normalize a language token to its canonical form.

    Args:
        token: Free-form language token. None, empty or whitespace-only
            input yields an empty string.

    Returns:
        Canonical ISO 639-2/T code, one of the keywords "any"/"none",
        or the lower-cased trimmed input when the token is not recognized.

    Examples:
        >>> normalize("English")
        'eng'
        >>> normalize("ger")
        'deu'
        >>> normalize("PTBR")
        'por'
        >>> normalize("tlh")
        'tlh'
    """
    if token is None:
        return ""

    lowered = token.strip().lower()
    if not lowered:
        return ""

    mapped = _ALIASES.get(lowered)
    if mapped is not None:
        return mapped

    if len(lowered) == 2:
        mapped = _ALPHA2_TO_ALPHA3.get(lowered)
        if mapped is not None:
            return mapped

    return lowered


def normalize_many(tokens: Iterable[str | None]) -> list[str]:
    """Normalize a sequence of tokens into an ordered, de-duplicated list.

    Blank results are dropped and duplicates are removed case-insensitively,
    keeping the first occurrence.

    Args:
        tokens: Language tokens in preference order.

    Returns:
        Canonical tokens in first-seen order.

    Raises:
        TypeError: If tokens is None.
    """
    if tokens is None:
        raise TypeError("tokens must not be None")

    seen: set[str] = set()
    result: list[str] = []
    for token in tokens:
        value = normalize(token)
        if not value:
            continue
        key = value.casefold()
        if key in seen:
            continue
        seen.add(key)
        result.append(value)
    return result


def languages_match(first: str | None, second: str | None) -> bool:
    """Check whether two tokens denote the same language.

    Empty tokens never match anything, including each other.
    """
    left = normalize(first)
    if not left:
        return False
    return left.casefold() == normalize(second).casefold()
