"""
Field validation for account requests.

A ``Validator`` runs a list of rules for each field and collects every
failure, so a client gets all of its mistakes back in one response:

    validator = Validator(
        data,
        {"email": [Required(), Email()], "password": [Required(), Password()]},
        attributes={"password": "Şifre"},
    )
    if validator.fails():
        raise ValidationError(validator.errors())

Messages are built from templates where ``{attribute}`` is the field's
display label.
"""

import unicodedata
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from email_validator import EmailNotValidError, validate_email

from .phone import PHONE_DIGITS, is_turkish_mobile, strip_phone_formatting

# Display labels for fields, used in messages
ATTRIBUTES = {
    "firstname": "İsim",
    "lastname": "Soyisim",
    "email": "Email",
    "phone_number": "Telefon Numarası",
    "password": "Şifre",
}

MESSAGES = {
    "required": "The {attribute} field is required.",
    "email": "The {attribute} field must be a valid email address.",
    "digits": "The {attribute} field must be {digits} digits.",
    "unique": "The {attribute} has already been taken.",
    "turkish_phone": "The {attribute} field must be a valid Turkish mobile phone number.",
    "password.min": "The {attribute} field must be at least {min} characters.",
    "password.mixed": "The {attribute} field must contain at least one uppercase and one lowercase letter.",
    "password.letters": "The {attribute} field must contain at least one letter.",
    "password.numbers": "The {attribute} field must contain at least one number.",
    "password.symbols": "The {attribute} field must contain at least one symbol.",
}


def is_symbol(char: str) -> bool:
    """Punctuation, symbol and separator characters all count as symbols."""
    return unicodedata.category(char)[0] in "PSZ"


def is_email(value: Any) -> bool:
    """Check email syntax only (no DNS lookups)."""
    if not isinstance(value, str):
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


class Rule:
    """
    Base class for validation rules.

    Subclasses implement ``check`` and return the keys of the messages
    that apply (an empty list when the value passes).
    """

    def messages(self, value: Any, attribute: str) -> List[str]:
        """Return the formatted failure messages for ``value``."""
        return [
            self.format(key, attribute)
            for key in self.check(value)
        ]

    def check(self, value: Any) -> List[str]:
        raise NotImplementedError

    def params(self) -> Dict[str, Any]:
        return {}

    def format(self, key: str, attribute: str) -> str:
        return MESSAGES[key].format(attribute=attribute, **self.params())


class Required(Rule):
    """The field must be present and not blank."""

    def check(self, value: Any) -> List[str]:
        return ["required"] if is_blank(value) else []


class Email(Rule):
    def check(self, value: Any) -> List[str]:
        return [] if is_email(value) else ["email"]


class Digits(Rule):
    """
    The value must be exactly ``length`` digits.

    Args:
        length: Required number of digits
        prepare: Optional function applied to the value before counting
    """

    def __init__(self, length: int, prepare: Optional[Callable[[str], str]] = None):
        self.length = length
        self.prepare = prepare

    def params(self) -> Dict[str, Any]:
        return {"digits": self.length}

    def check(self, value: Any) -> List[str]:
        text = str(value)
        if self.prepare is not None:
            text = self.prepare(text)
        if len(text) == self.length and text.isascii() and text.isdigit():
            return []
        return ["digits"]


class Unique(Rule):
    """
    The value must not already exist in the store.

    Args:
        exists: Callable answering whether the value is taken
        prepare: Optional function mapping the raw value to its stored form.
            If it returns None the value cannot be stored anyway, so the
            uniqueness check is skipped.
    """

    def __init__(
        self,
        exists: Callable[[str], bool],
        prepare: Optional[Callable[[str], Optional[str]]] = None
    ):
        self.exists = exists
        self.prepare = prepare

    def check(self, value: Any) -> List[str]:
        stored = self.prepare(value) if self.prepare is not None else value
        if stored is None:
            return []
        return ["unique"] if self.exists(stored) else []


class TurkishPhone(Rule):
    """The value must be a Turkish mobile number (see accounts.auth.phone)."""

    def check(self, value: Any) -> List[str]:
        return [] if is_turkish_mobile(value) else ["turkish_phone"]


class Password(Rule):
    """
    Password strength rule.

    Each enabled character class that is missing is reported separately.
    There is no maximum length.
    """

    def __init__(
        self,
        min_length: int = 8,
        mixed_case: bool = True,
        letters: bool = True,
        numbers: bool = True,
        symbols: bool = True
    ):
        self.min_length = min_length
        self.mixed_case = mixed_case
        self.letters = letters
        self.numbers = numbers
        self.symbols = symbols

    def params(self) -> Dict[str, Any]:
        return {"min": self.min_length}

    def check(self, value: Any) -> List[str]:
        text = str(value)
        failures = []

        if len(text) < self.min_length:
            failures.append("password.min")
        if self.mixed_case and not (
            any(c.isupper() for c in text) and any(c.islower() for c in text)
        ):
            failures.append("password.mixed")
        if self.letters and not any(c.isalpha() for c in text):
            failures.append("password.letters")
        if self.numbers and not any(c.isdigit() for c in text):
            failures.append("password.numbers")
        if self.symbols and not any(is_symbol(c) for c in text):
            failures.append("password.symbols")

        return failures


def phone_digits() -> Digits:
    """Digits rule that ignores phone separators such as spaces and ``+``."""
    return Digits(PHONE_DIGITS, prepare=strip_phone_formatting)


class Validator:
    """
    Validate a mapping of input data against per-field rules.

    A blank value only reports ``Required`` (when that rule is present);
    a blank optional value is skipped. Otherwise every rule runs and all
    of its messages are kept.
    """

    def __init__(
        self,
        data: Mapping[str, Any],
        rules: Mapping[str, Sequence[Rule]],
        attributes: Optional[Mapping[str, str]] = None
    ):
        self.data = data
        self.rules = rules
        self.attributes = dict(ATTRIBUTES)
        if attributes:
            self.attributes.update(attributes)
        self._errors: Optional[Dict[str, List[str]]] = None

    def _attribute(self, field: str) -> str:
        return self.attributes.get(field, field.replace("_", " "))

    def validate(self) -> Dict[str, List[str]]:
        errors: Dict[str, List[str]] = {}

        for field, rules in self.rules.items():
            value = self.data.get(field)
            attribute = self._attribute(field)
            messages: List[str] = []

            if is_blank(value):
                for rule in rules:
                    if isinstance(rule, Required):
                        messages.extend(rule.messages(value, attribute))
            else:
                for rule in rules:
                    messages.extend(rule.messages(value, attribute))

            if messages:
                errors[field] = messages

        self._errors = errors
        return errors

    def errors(self) -> Dict[str, List[str]]:
        if self._errors is None:
            self.validate()
        return self._errors

    def fails(self) -> bool:
        return bool(self.errors())

    def passes(self) -> bool:
        return not self.fails()
