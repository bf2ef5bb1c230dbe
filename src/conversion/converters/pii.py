"""
PII masking and hashing converters.

Masking keeps the shape of a value (length, separators, last digits) while
hiding the sensitive part; hashing pseudonymizes consistently for a given
salt, so converted foreign keys still join.
"""

import hashlib
import json
import logging
import re
import secrets
from typing import Any

from .base import Converter

logger = logging.getLogger(__name__)

MASK_KINDS = frozenset({"auto", "email", "phone", "ssn", "credit_card", "ip_address"})


def detect_kind(field_name: str) -> str | None:
    """Guess the PII kind of a column from its name."""
    name = field_name.lower()
    # Short markers only count as whole words: "shipping_address" is no IP
    parts = set(re.split(r"[^a-z0-9]+", name))
    if "email" in name:
        return "email"
    if "phone" in name or "mobile" in name or "tel" in parts:
        return "phone"
    if "ssn" in name or "social" in name:
        return "ssn"
    if "credit" in name or "card" in name or "cc" in parts:
        return "credit_card"
    if ("ip" in parts and parts & {"address", "addr"}) or "ipaddress" in parts:
        return "ip_address"
    return None


class MaskingConverter(Converter):
    """
    Mask PII data (email, phone, SSN, credit cards, IP addresses).

    With ``kind="auto"`` the kind is picked from the field name in the
    context; values of unrecognized fields and non-string values are
    returned unchanged.
    """

    def __init__(
        self,
        kind: str = "auto",
        mask_char: str = "*",
        preserve_format: bool = True,
        email_preserve_domain: bool = True,
    ):
        """
        Initialize masking converter.

        Args:
            kind: One of auto, email, phone, ssn, credit_card, ip_address
            mask_char: Character to use for masking
            preserve_format: Whether to keep separators in place
            email_preserve_domain: Keep email domain visible

        Raises:
            ValueError: If kind is unknown or mask_char is not one character
        """
        if kind not in MASK_KINDS:
            raise ValueError(
                f"Unknown mask kind: {kind}. Allowed kinds: {', '.join(sorted(MASK_KINDS))}"
            )
        if len(mask_char) != 1:
            raise ValueError("mask_char must be a single character")

        self.kind = kind
        self.mask_char = mask_char
        self.preserve_format = preserve_format
        self.email_preserve_domain = email_preserve_domain

    def convert(self, value: Any, context: dict[str, Any]) -> Any:
        if not isinstance(value, str):
            return value

        kind = self.kind
        if kind == "auto":
            kind = detect_kind(context.get("field_name", ""))
            if kind is None:
                return value

        return getattr(self, f"_mask_{kind}")(value)

    def _mask_email(self, email: str) -> str:
        """
        Mask email address.

        Examples:
            user@example.com -> u***@example.com
            john.doe@company.com -> j*******@company.com
        """
        if "@" not in email:
            return email

        local, domain = email.split("@", 1)

        # Malformed addresses such as user@@example.com are masked entirely
        if not local or not domain or "@" in domain:
            return self.mask_char * len(email)

        if len(local) <= 1:
            return email

        masked_local = local[0] + self.mask_char * (len(local) - 1)
        if self.email_preserve_domain:
            return f"{masked_local}@{domain}"
        return f"{masked_local}@{self.mask_char * len(domain)}"

    def _mask_digits_keep_last4(self, value: str, digits: str) -> str:
        masked_digits = self.mask_char * (len(digits) - 4) + digits[-4:]
        if not self.preserve_format:
            return masked_digits

        chars = list(value)
        digit_index = 0
        for i, char in enumerate(value):
            if char.isdigit():
                chars[i] = masked_digits[digit_index]
                digit_index += 1
        return "".join(chars)

    def _mask_phone(self, phone: str) -> str:
        """
        Mask phone number keeping last 4 digits.

        Examples:
            (123) 456-7890 -> (***) ***-7890
        """
        digits = re.sub(r"\D", "", phone)

        # Fewer than 4 digits is not a phone number
        if len(digits) < 4:
            return phone

        return self._mask_digits_keep_last4(phone, digits)

    def _mask_ssn(self, ssn: str) -> str:
        """
        Mask Social Security Number keeping last 4 digits.

        Examples:
            123-45-6789 -> ***-**-6789
            123456789 -> *****6789
        """
        digits = re.sub(r"\D", "", ssn)

        if len(digits) != 9:
            logger.debug(f"Invalid SSN format: expected 9 digits, got {len(digits)}")
            return self.mask_char * len(ssn)

        if self.preserve_format and "-" in ssn:
            return f"{self.mask_char * 3}-{self.mask_char * 2}-{digits[-4:]}"
        return self.mask_char * 5 + digits[-4:]

    def _mask_credit_card(self, card: str) -> str:
        """
        Mask credit card number keeping last 4 digits.

        Examples:
            4532-1234-5678-9010 -> ****-****-****-9010
        """
        digits = re.sub(r"\D", "", card)

        if len(digits) < 13 or len(digits) > 19:
            logger.debug(f"Invalid credit card length: {len(digits)} digits")
            return self.mask_char * len(card)

        return self._mask_digits_keep_last4(card, digits)

    def _mask_ip_address(self, ip: str) -> str:
        """
        Mask IP address preserving the network prefix.

        Examples:
            192.168.1.100 -> 192.***.*.***
            fe80::1 -> fe80:0000:0000:0000:****:****:****:****
        """
        if re.match(r"^\d+\.\d+\.\d+\.\d+$", ip):
            first = ip.split(".")[0]
            return f"{first}.{self.mask_char * 3}.{self.mask_char}.{self.mask_char * 3}"

        if ":" in ip:
            if "::" in ip:
                before, after = ip.split("::", 1)
                before_parts = before.split(":") if before else []
                after_parts = after.split(":") if after else []
                missing = 8 - len(before_parts) - len(after_parts)
                parts = before_parts + ["0000"] * missing + after_parts
            else:
                parts = ip.split(":")

            if len(parts) >= 4:
                return ":".join(parts[:4] + [self.mask_char * 4] * (len(parts) - 4))

        prefix_len = min(4, len(ip) // 2)
        return ip[:prefix_len] + self.mask_char * (len(ip) - prefix_len)


class HashingConverter(Converter):
    """
    One-way salted hash for pseudonymization.

    The same value and salt always give the same hash, so hashed keys stay
    consistent across tables of one dump.
    """

    ALLOWED_ALGORITHMS = frozenset({"sha256", "sha384", "sha512", "blake2b", "blake2s"})
    MIN_SALT_LENGTH = 8

    def __init__(
        self,
        algorithm: str = "sha256",
        salt: str | None = None,
        truncate: int | None = None,
    ):
        """
        Initialize hashing converter.

        Args:
            algorithm: Hash algorithm (sha256, sha384, sha512, blake2b, blake2s)
            salt: Salt prepended before hashing; random when omitted
            truncate: Optional truncation length for the hex digest

        Raises:
            ValueError: If algorithm is insecure, salt too short or truncate invalid
        """
        if (
            not isinstance(algorithm, str)
            or algorithm.lower() not in self.ALLOWED_ALGORITHMS
        ):
            raise ValueError(
                f"Insecure hash algorithm: {algorithm}. "
                f"Allowed algorithms: {', '.join(sorted(self.ALLOWED_ALGORITHMS))}"
            )

        if salt is None:
            salt = secrets.token_hex(16)
            logger.warning(
                "No salt provided to HashingConverter. Generated random salt; "
                "hashes will differ between dumps."
            )
        elif not isinstance(salt, str):
            raise ValueError(f"Salt must be a string, got {type(salt).__name__}")
        elif len(salt) < self.MIN_SALT_LENGTH:
            raise ValueError(f"Salt must be at least {self.MIN_SALT_LENGTH} characters long")

        if truncate is not None and (not isinstance(truncate, int) or truncate < 1):
            raise ValueError(f"truncate must be a positive integer, got {truncate!r}")

        self.algorithm = algorithm.lower()
        self.salt = salt
        self.truncate = truncate

    def convert(self, value: Any, context: dict[str, Any]) -> Any:
        if value is None:
            return None

        if isinstance(value, float):
            str_value = repr(value)
        elif isinstance(value, (dict, list)):
            str_value = json.dumps(value, sort_keys=True)
        elif isinstance(value, bytes):
            str_value = value.hex()
        else:
            str_value = str(value)

        hasher = hashlib.new(self.algorithm)
        hasher.update(f"{self.salt}{str_value}".encode())
        hash_value = hasher.hexdigest()

        if self.truncate:
            hash_value = hash_value[: self.truncate]
        return hash_value
