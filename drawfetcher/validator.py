"""Validate extracted draw digits."""

from typing import List, Optional

import structlog

from .models import ExtractionResult, ValidationResult

logger = structlog.get_logger(__name__)


class Validator:
    """Validate digit strings before they are combined into a report."""

    def validate_digits(self, value: Optional[str], count: int) -> ValidationResult:
        """
        Validate a digit string.

        Args:
            value: Extracted digits (may be None)
            count: Expected number of digits

        Returns:
            ValidationResult with validity and errors
        """
        errors: List[str] = []

        if value is None:
            errors.append("Digits not found")
        else:
            if len(value) != count:
                errors.append(f"Expected {count} digits, got {len(value)}")
            if not (value.isascii() and value.isdigit()):
                errors.append("Non-decimal character in digits")

        return ValidationResult(valid=not errors, errors=errors)

    def clean(self, result: Optional[ExtractionResult], count: int) -> Optional[str]:
        """
        Return the result's digits if they are valid for `count`, else None.

        Args:
            result: Extraction result (may be None)
            count: Expected number of digits

        Returns:
            Digit string or None
        """
        if result is None:
            return None

        validation = self.validate_digits(result.digits, count)
        if validation.valid:
            return result.digits

        if result.digits is not None:
            logger.warning(
                "digits_rejected",
                state=result.state,
                game=result.game.value,
                slot=result.slot.value,
                digits=result.digits,
                errors=validation.errors,
            )
        return None
