"""Blueprint Parser - JSON configuration to a validated node tree."""

from typing import Any

import pydantic
from returns.result import Failure, Result, Success

from core import get_logger, get_settings, ValidationError
from core.json import JSONParseError, extract_json, validate_json_size
from core.validate import ValidationResult, validate_acyclic, validate_json_depth
from .models import ComponentNode

logger = get_logger(__name__)


class BlueprintParser:
    """Parses UI configurations (JSON text or plain dicts) into ComponentNode trees."""

    def __init__(
        self,
        max_depth: int | None = None,
        max_size: int | None = None,
        repair: bool = False,
    ) -> None:
        settings = get_settings()
        self.max_depth = max_depth or settings.max_config_depth
        self.max_size = max_size or settings.max_config_size
        self.repair = repair

    def parse(self, content: str | dict[str, Any] | ComponentNode) -> ComponentNode:
        """
        Parse a configuration into its root node.

        Args:
            content: JSON string, already-decoded dict, or a node

        Returns:
            Validated root ComponentNode

        Raises:
            ValidationError: If the configuration is unreadable or malformed
        """
        if isinstance(content, ComponentNode):
            return content

        if isinstance(content, str):
            try:
                validate_json_size(content, self.max_size, "Configuration")
                data = extract_json(content, repair=self.repair)
            except JSONParseError as e:
                logger.error("json_parse_failed", error=str(e))
                raise ValidationError(f"Invalid JSON: {e}") from e
        else:
            data = content

        if not isinstance(data, dict):
            logger.error("invalid_format", type=type(data).__name__)
            raise ValidationError("Invalid configuration: expected JSON object")

        validate_acyclic(data)
        validate_json_depth(data, self.max_depth)

        try:
            node = ComponentNode.model_validate(data)
        except pydantic.ValidationError as e:
            first = e.errors()[0] if e.errors() else {}
            location = ".".join(str(part) for part in first.get("loc", ()))
            logger.error("invalid_config", field=location, errors=e.error_count())
            raise ValidationError(f"Invalid configuration at '{location}': {first.get('msg', e)}") from e

        logger.debug("config_parsed", type=node.type, fetches=len(node.data_fetch))
        return node


def parse_blueprint(content: str | dict[str, Any]) -> ComponentNode:
    """
    Convenience function to parse a configuration.

    Args:
        content: JSON string or dict

    Returns:
        Root ComponentNode
    """
    return BlueprintParser().parse(content)


def validate_config(content: str | dict[str, Any]) -> Result[ComponentNode, ValidationResult]:
    """
    Parse a configuration (Result pattern version).

    Returns:
        Success with the root node, or Failure with the validation message
    """
    try:
        return Success(parse_blueprint(content))
    except ValidationError as e:
        return Failure(ValidationResult(str(e)))
