"""
Prompt builder for trivia generation.

Responsible for:
- Loading and rendering Jinja2 templates (system, initial, correction prompts)
- Injecting the region name and the character limits
- Building the one-turn conversation that starts every model attempt
"""

from pathlib import Path
from typing import Optional

import structlog
from jinja2 import Environment, FileSystemLoader, StrictUndefined

from trivia_service.models.enums import ConversationRole
from trivia_service.models.llm_models import ConversationTurn


logger = structlog.get_logger(__name__)


class PromptBuilder:
    """
    Build prompts for the trivia model from Jinja2 templates.

    Templates are loaded once at construction; every build_* method is a
    pure function of its arguments and the builder's fixed settings.
    """

    SYSTEM_TEMPLATE = "system_prompt.j2"
    USER_TEMPLATE = "user_prompt.j2"
    CORRECTION_TEMPLATE = "correction_prompt.j2"

    def __init__(
        self,
        templates_dir: Path,
        region: str = "北九州",
        min_chars: int = 70,
        max_chars: int = 100,
        example: Optional[str] = None,
    ):
        """
        Initialize prompt builder.

        Args:
            templates_dir: Directory containing the prompt templates
            region: Region every trivia must be tied to
            min_chars: Minimum accepted answer length (characters)
            max_chars: Maximum accepted answer length (characters)
            example: Optional worked example appended to the system prompt
        """
        if min_chars > max_chars:
            raise ValueError("min_chars must not exceed max_chars")

        self.templates_dir = Path(templates_dir)
        self.region = region
        self.min_chars = min_chars
        self.max_chars = max_chars
        self.example = example

        self.jinja_env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
            autoescape=False  # We're generating prompts, not HTML
        )

        try:
            self.system_template = self.jinja_env.get_template(self.SYSTEM_TEMPLATE)
            self.user_template = self.jinja_env.get_template(self.USER_TEMPLATE)
            self.correction_template = self.jinja_env.get_template(self.CORRECTION_TEMPLATE)
            logger.info("Loaded prompt templates", templates_dir=str(self.templates_dir))
        except Exception as e:
            logger.error("Failed to load prompt templates", error=str(e))
            raise

        # The system prompt has no per-request variables.
        self._system_prompt = self.system_template.render(
            region=self.region,
            min_chars=self.min_chars,
            max_chars=self.max_chars,
            example=self.example,
        ).strip()

    def build_system_prompt(self) -> str:
        """Return the fixed system instruction sent with every call."""
        return self._system_prompt

    def build_initial_prompt(self, keyword: str) -> str:
        """
        Render the first user turn for a keyword.

        Asks for exactly one plain paragraph of min_chars..max_chars
        characters that ends in "。".
        """
        return self.user_template.render(
            keyword=keyword,
            region=self.region,
            min_chars=self.min_chars,
            max_chars=self.max_chars,
        ).strip()

    def build_correction_prompt(self, observed_length: int) -> str:
        """
        Render the follow-up turn for an answer of the wrong length.

        Below min_chars the model is told to add a concrete detail without
        passing max_chars; otherwise it is told to trim without dropping
        under min_chars.
        """
        return self.correction_template.render(
            too_short=observed_length < self.min_chars,
            observed_length=observed_length,
            min_chars=self.min_chars,
            max_chars=self.max_chars,
        ).strip()

    def build_initial_conversation(self, keyword: str) -> list[ConversationTurn]:
        return [ConversationTurn(role=ConversationRole.USER, text=self.build_initial_prompt(keyword))]

    def is_valid_length(self, text: str) -> bool:
        return self.min_chars <= len(text) <= self.max_chars
