"""
Input Validation Utilities

FLOW OVERVIEW
- validate_email(email)
  • RFC-like syntax checks and basic security checks; returns sanitized lowercased value.
- validate_password_strength(password)
  • Enforce length and character variety.
- sanitize_input(input, max_length)
  • Trim, bound length, normalize, and remove null bytes.
- validate_address_form / validate_product_form / validate_category_form
  • Turn submitted form fields into clean dicts, or a list of error messages.
- parse_price / parse_quantity / validate_slug
  • Field-level helpers shared by the form validators.
"""

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from ..models.catalog import PRODUCT_STATUSES
from ..models.utils import slugify

# Largest value a Numeric(10, 2) money column holds
MAX_PRICE = Decimal('99999999.99')


@dataclass
class ValidationResult:
    """Result of validation operation"""
    is_valid: bool
    error_message: Optional[str] = None
    sanitized_value: Optional[Any] = None


@dataclass
class FormValidationResult:
    """Result of validating a whole form"""
    data: Dict[str, Any] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


class InputValidator:
    """Input validation helpers"""

    # RFC 5322 compliant email regex (simplified but secure)
    EMAIL_PATTERN = re.compile(
        r'^[a-zA-Z0-9.!#$%&\'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)+$'
    )

    SLUG_PATTERN = re.compile(r'^[a-z0-9]+(?:-[a-z0-9]+)*$')

    XSS_PATTERNS = [
        r'<script[^>]*>.*?</script>',
        r'javascript:',
        r'on\w+\s*=',
        r'<iframe[^>]*>',
        r'data:text/html',
        r'vbscript:',
    ]

    @classmethod
    def validate_email(cls, email: str) -> ValidationResult:
        """
        Validate email address

        Args:
            email: Email address to validate

        Returns:
            ValidationResult with validation status and sanitized value
        """
        if not email or not isinstance(email, str):
            return ValidationResult(False, "Email must be a non-empty string")

        email = email.strip()
        if email == "":
            return ValidationResult(False, "Email cannot be empty")

        # Length validation (RFC 5321 limits)
        if len(email) > 254:
            return ValidationResult(False, "Email address too long (max 254 characters)")

        if email.count('@') != 1:
            return ValidationResult(False, "Invalid email format")

        if not cls.EMAIL_PATTERN.match(email):
            return ValidationResult(False, "Invalid email format")

        local_part, domain = email.split('@')
        if len(local_part) > 64:
            return ValidationResult(False, "Email local part too long (max 64 characters)")

        if local_part.startswith('.') or local_part.endswith('.') or '..' in local_part:
            return ValidationResult(False, "Invalid email format")

        if '..' in domain:
            return ValidationResult(False, "Invalid email format")

        if cls._contains_xss(email):
            return ValidationResult(False, "Email contains invalid characters")

        return ValidationResult(True, sanitized_value=email.lower())

    @classmethod
    def validate_password_strength(cls, password: str) -> ValidationResult:
        """
        Validate password strength requirements

        Args:
            password: Password to validate

        Returns:
            ValidationResult with validation status
        """
        if not password or not isinstance(password, str):
            return ValidationResult(False, "Password must be a non-empty string")

        if len(password) < 8:
            return ValidationResult(False, "Password must be at least 8 characters long")

        if len(password) > 128:
            return ValidationResult(False, "Password too long (max 128 characters)")

        weak_passwords = {
            'password', '123456', 'qwerty', 'abc123', 'password123',
            'admin', 'letmein', 'welcome', 'monkey', 'dragon'
        }

        if password.lower() in weak_passwords:
            return ValidationResult(False, "Password is too common, choose a stronger password")

        has_upper = any(c.isupper() for c in password)
        has_lower = any(c.islower() for c in password)
        has_digit = any(c.isdigit() for c in password)

        if not (has_upper and has_lower and has_digit):
            return ValidationResult(False, "Password must contain uppercase, lowercase, and numeric characters")

        return ValidationResult(True)

    @classmethod
    def sanitize_input(cls, input_string: str, max_length: int = 1000) -> str:
        """
        Sanitize user input

        Args:
            input_string: Input string to sanitize
            max_length: Maximum allowed length

        Returns:
            Sanitized string
        """
        if not input_string:
            return ""

        sanitized = str(input_string).strip()

        if len(sanitized) > max_length:
            sanitized = sanitized[:max_length]

        # Remove null bytes
        sanitized = sanitized.replace('\x00', '')

        # Normalize line endings
        sanitized = sanitized.replace('\r\n', '\n').replace('\r', '\n')

        return sanitized

    @classmethod
    def _contains_xss(cls, text: str) -> bool:
        """Check if text contains XSS patterns"""
        for pattern in cls.XSS_PATTERNS:
            if re.search(pattern, text, re.IGNORECASE):
                return True
        return False


# Convenience functions for common validations
def validate_email(email: str) -> ValidationResult:
    """Validate email address"""
    return InputValidator.validate_email(email)


def validate_password_strength(password: str) -> ValidationResult:
    """Validate password strength"""
    return InputValidator.validate_password_strength(password)


def sanitize_input(input_string: str, max_length: int = 1000) -> str:
    """Sanitize user input"""
    return InputValidator.sanitize_input(input_string, max_length)


def parse_price(value, field_name='Price', required=True) -> ValidationResult:
    """Parse a non-negative money amount with at most two decimals"""
    raw = sanitize_input(value, 32)
    if raw == '':
        if required:
            return ValidationResult(False, f"{field_name} is required")
        return ValidationResult(True, sanitized_value=None)
    try:
        amount = Decimal(raw)
    except InvalidOperation:
        return ValidationResult(False, f"{field_name} must be a number")
    if not amount.is_finite() or amount < 0:
        return ValidationResult(False, f"{field_name} must be zero or more")
    if amount > MAX_PRICE:
        return ValidationResult(False, f"{field_name} must be at most {MAX_PRICE}")
    return ValidationResult(True, sanitized_value=amount.quantize(Decimal('0.01')))


def parse_quantity(value, field_name='Quantity', minimum=0) -> ValidationResult:
    """Parse a whole number no smaller than minimum"""
    raw = sanitize_input(value, 16)
    try:
        quantity = int(raw)
    except (TypeError, ValueError):
        return ValidationResult(False, f"{field_name} must be a whole number")
    if quantity < minimum:
        return ValidationResult(False, f"{field_name} must be at least {minimum}")
    return ValidationResult(True, sanitized_value=quantity)


def validate_slug(slug: str, fallback_name: str = '') -> ValidationResult:
    """Accept a url slug, deriving it from fallback_name when blank"""
    slug = sanitize_input(slug, 220).lower() or slugify(fallback_name)
    if not slug:
        return ValidationResult(False, "Slug is required")
    if not InputValidator.SLUG_PATTERN.match(slug):
        return ValidationResult(False, "Slug may only contain lowercase letters, numbers and dashes")
    return ValidationResult(True, sanitized_value=slug)


ADDRESS_REQUIRED_FIELDS = {
    'full_name': 'Full name',
    'phone': 'Phone',
    'address_line1': 'Address line 1',
    'city': 'City',
    'state': 'State',
    'postal_code': 'Postal code',
}


def validate_address_form(form) -> FormValidationResult:
    """Validate a shipping address submitted at checkout"""
    result = FormValidationResult()
    for name, label in ADDRESS_REQUIRED_FIELDS.items():
        value = sanitize_input(form.get(name), 200)
        if not value:
            result.errors.append(f"{label} is required")
        result.data[name] = value
    result.data['address_line2'] = sanitize_input(form.get('address_line2'), 200) or None
    result.data['country'] = sanitize_input(form.get('country'), 80) or 'Ghana'
    return result


def validate_category_form(form) -> FormValidationResult:
    result = FormValidationResult()
    name = sanitize_input(form.get('name'), 120)
    if not name:
        result.errors.append("Name is required")
    result.data['name'] = name

    slug = validate_slug(form.get('slug'), name)
    if slug.is_valid:
        result.data['slug'] = slug.sanitized_value
    elif name:
        result.errors.append(slug.error_message)

    result.data['description'] = sanitize_input(form.get('description'), 2000) or None
    result.data['image_url'] = sanitize_input(form.get('image_url'), 500) or None
    return result


def validate_product_form(form) -> FormValidationResult:
    """Validate the back-office product form"""
    result = FormValidationResult()

    name = sanitize_input(form.get('name'), 200)
    if not name:
        result.errors.append("Product name is required")
    result.data['name'] = name

    slug = validate_slug(form.get('slug'), name)
    if slug.is_valid:
        result.data['slug'] = slug.sanitized_value
    elif name:
        result.errors.append(slug.error_message)

    description = sanitize_input(form.get('description'), 5000)
    if not description:
        result.errors.append("Description is required")
    result.data['description'] = description

    for key, label, required in (('price', 'Price', True), ('compare_at_price', 'Compare-at price', False)):
        parsed = parse_price(form.get(key), label, required=required)
        if parsed.is_valid:
            result.data[key] = parsed.sanitized_value
        else:
            result.errors.append(parsed.error_message)

    stock = parse_quantity(form.get('stock_quantity', '0') or '0', 'Stock quantity')
    if stock.is_valid:
        result.data['stock_quantity'] = stock.sanitized_value
    else:
        result.errors.append(stock.error_message)

    category_id = sanitize_input(form.get('category_id'), 16)
    if not category_id.isdigit():
        result.errors.append("Category is required")
    else:
        result.data['category_id'] = int(category_id)

    status = sanitize_input(form.get('status'), 20) or 'available'
    if status not in PRODUCT_STATUSES:
        result.errors.append("Status must be available or preorder")
    result.data['status'] = status

    result.data['image_url'] = sanitize_input(form.get('image_url'), 500) or None
    # Checkboxes are only submitted when ticked
    result.data['is_active'] = form.get('is_active') in ('on', 'true', '1', 'y')
    result.data['is_featured'] = form.get('is_featured') in ('on', 'true', '1', 'y')
    return result
