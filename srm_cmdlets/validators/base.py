"""
SRM Cmdlets - Validator Framework

Pre-flight checks run before an operation sends anything to SRM.
A validator reads remote state and reports pass or fail; it never
changes anything. Operations turn a failed check into an exception.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ValidationResult:
    """
    Outcome of one check.

    `details` carries machine-readable context for the caller, such as
    the state that was found and a suggested fix under 'fix'.
    """
    validator_name: str
    passed: bool
    message: str
    details: dict = field(default_factory=dict)

    @property
    def fix(self) -> Optional[str]:
        return self.details.get('fix')

    def __str__(self):
        status = "[OK]" if self.passed else "[X]"
        return f"{status} {self.validator_name}: {self.message}"


class ValidationResults:
    """Results of a validation run, in the order the checks ran."""

    def __init__(self, results: List[ValidationResult] = None):
        self.results: List[ValidationResult] = list(results or [])

    def add(self, result: ValidationResult):
        self.results.append(result)

    def all_passed(self) -> bool:
        return all(r.passed for r in self.results)

    def get_failures(self) -> List[ValidationResult]:
        return [r for r in self.results if not r.passed]

    def first_failure(self) -> Optional[ValidationResult]:
        failures = self.get_failures()
        return failures[0] if failures else None

    def log_failures(self, logger):
        """Log each failed check with its suggested fix."""
        for result in self.get_failures():
            logger.error(f"{result.validator_name}: {result.message}")
            if result.fix:
                logger.error(f"  Fix: {result.fix}")


class BaseValidator(ABC):
    """
    Base class for validators.

    Subclasses implement validate() and name.
    """

    def __init__(self, subject):
        """
        Args:
            subject: Remote object to check (e.g. a recovery plan handle)
        """
        self.subject = subject

    @abstractmethod
    def validate(self) -> ValidationResult:
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        pass


class ValidationRunner:
    """
    Runs validators in order and collects their results.

    Example:
        results = ValidationRunner().add(RecoveryPlanStateValidator(plan)).run_all(logger)
        if not results.all_passed():
            results.log_failures(logger)
    """

    def __init__(self):
        self.validators: List[BaseValidator] = []

    def add(self, validator: BaseValidator) -> 'ValidationRunner':
        self.validators.append(validator)
        return self

    def run_all(self, logger=None, stop_on_failure: bool = False) -> ValidationResults:
        """
        Run the validators.

        Args:
            logger: Optional logger for debug output
            stop_on_failure: Skip the remaining checks after the first failure

        Returns:
            ValidationResults
        """
        results = ValidationResults()

        for validator in self.validators:
            result = validator.validate()
            results.add(result)

            if logger:
                status = "PASS" if result.passed else "FAIL"
                logger.debug(f"Validator {validator.name}: {status} ({result.message})")

            if stop_on_failure and not result.passed:
                break

        return results
