"""Loader for YAML fetch profiles."""

import time
from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from ranking_fetch.config.schemas import FetchProfile


logger = structlog.get_logger()


class ConfigValidationError(Exception):
    """Raised when a fetch profile cannot be loaded or validated."""

    def __init__(self, errors: list[dict[str, str]], file_path: str) -> None:
        """Initialize the error.

        Args:
            errors: List of validation error details.
            file_path: Path to the file that failed validation.
        """
        self.errors = errors
        self.file_path = file_path
        super().__init__(f"Validation failed for {file_path}: {len(errors)} errors")


class ConfigLoader:
    """Loads and validates fetch profile files."""

    def __init__(self, run_id: str | None = None) -> None:
        """Initialize the loader.

        Args:
            run_id: Run identifier for logging.
        """
        self._log = logger.bind(component="config", run_id=run_id)

    def load(self, path: Path) -> FetchProfile:
        """Load a fetch profile from a YAML file.

        Args:
            path: Path to the profile file.

        Returns:
            Validated FetchProfile.

        Raises:
            ConfigValidationError: If the file is missing, unparsable or invalid.
        """
        start_time = time.perf_counter()
        log = self._log.bind(file_path=str(path))
        log.info("loading_config_file")

        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            log.error("config_file_not_found", error=str(e))
            raise ConfigValidationError(
                [{"loc": "file", "msg": str(e), "type": "file_not_found"}], str(path)
            ) from e

        profile = self.load_text(content, str(path))
        log.info(
            "config_ready",
            profile=profile.name,
            config_validation_duration_ms=round(
                (time.perf_counter() - start_time) * 1000, 2
            ),
        )
        return profile

    def load_text(self, content: str, source: str = "<string>") -> FetchProfile:
        """Validate a fetch profile from YAML text.

        Args:
            content: YAML document.
            source: Name used in error messages.

        Returns:
            Validated FetchProfile.

        Raises:
            ConfigValidationError: If the YAML is unparsable or invalid.
        """
        try:
            data = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            self._log.error("config_yaml_parse_error", file_path=source, error=str(e))
            raise ConfigValidationError(
                [{"loc": "yaml", "msg": str(e), "type": "yaml_parse_error"}], source
            ) from e

        try:
            return FetchProfile.model_validate(data)
        except ValidationError as e:
            errors = [
                {
                    "loc": ".".join(str(loc) for loc in err["loc"]),
                    "msg": err["msg"],
                    "type": err["type"],
                }
                for err in e.errors()
            ]
            self._log.error(
                "config_validation_failed",
                file_path=source,
                validation_error_count=len(errors),
                errors=errors,
            )
            raise ConfigValidationError(errors, source) from e
