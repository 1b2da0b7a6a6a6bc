"""Core validation logic for cryptofuncs configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from cryptofuncs.config import find_config_file, load_config
from cryptofuncs.core.module import build_registry
from cryptofuncs.core.template import LogTemplate
from cryptofuncs.exceptions import CryptofuncsError, TemplateError

if TYPE_CHECKING:
    from cryptofuncs.config import Config


@dataclass
class ValidationResult:
    """Result of a validation check."""

    passed: bool
    message: str
    details: str | None = None


@dataclass
class ValidationReport:
    """Complete validation report."""

    checks: list[ValidationResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        """Check if all validations passed."""
        return all(c.passed for c in self.checks)

    @property
    def warnings(self) -> list[ValidationResult]:
        """Get checks that passed but have warnings."""
        return [c for c in self.checks if c.passed and c.details]

    @property
    def failures(self) -> list[ValidationResult]:
        """Get failed checks."""
        return [c for c in self.checks if not c.passed]


def validate_config_exists(config_path: Path | None) -> ValidationResult:
    """Check if config file exists.

    Args:
        config_path: Explicit config path or None to search.

    Returns:
        Validation result.
    """
    try:
        path = find_config_file(config_path)
    except CryptofuncsError as e:
        return ValidationResult(passed=False, message="Config file not found", details=str(e))

    if path is None:
        return ValidationResult(
            passed=False,
            message="Config file not found",
            details="Create config.yaml or pass --config",
        )

    return ValidationResult(
        passed=True,
        message=f"Config file found: {path}",
    )


def validate_config_syntax(config_path: Path | None) -> ValidationResult:
    """Check if config file has valid syntax.

    Args:
        config_path: Explicit config path or None to search.

    Returns:
        Validation result.
    """
    try:
        load_config(config_path)
    except CryptofuncsError as e:
        return ValidationResult(
            passed=False,
            message="Config syntax invalid",
            details=str(e),
        )
    return ValidationResult(passed=True, message="Config syntax valid")


def validate_template(name: str, text: str, config: Config) -> ValidationResult:
    """Check that a configured template compiles.

    Args:
        name: Template name in the config.
        text: Template source.
        config: Configuration the registry is built from.

    Returns:
        Validation result.
    """
    try:
        template = LogTemplate.compile(text, build_registry(config))
    except TemplateError as e:
        return ValidationResult(
            passed=False,
            message=f"Template '{name}' failed to compile",
            details=str(e),
        )
    template.close()
    return ValidationResult(passed=True, message=f"Template '{name}' compiles")


def validate_templates(config: Config) -> list[ValidationResult]:
    """Compile every template in the config.

    Args:
        config: Loaded configuration.

    Returns:
        One result per template, or a single warning if none are configured.
    """
    if not config.templates:
        return [
            ValidationResult(
                passed=True,
                message="No templates configured",
                details="Add templates under the 'templates' key",
            )
        ]
    return [validate_template(name, text, config) for name, text in config.templates.items()]


def run_validation(config_path: Path | None, config: Config | None = None) -> ValidationReport:
    """Run all validation checks.

    Args:
        config_path: Explicit config path or None to search.
        config: Already-loaded config or None to load from disk.

    Returns:
        Complete validation report.
    """
    report = ValidationReport()

    report.checks.append(validate_config_exists(config_path))
    if not report.checks[-1].passed:
        return report

    report.checks.append(validate_config_syntax(config_path))
    if not report.checks[-1].passed:
        return report

    if config is None:
        config = load_config(config_path)
    report.checks.extend(validate_templates(config))

    return report
