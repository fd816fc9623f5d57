# src/review_relay/config.py
from typing import Literal
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from review_relay.models.config import RenderConfig


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    platform: Literal["github", "bitbucket", "azure"] = "github"

    # Review service
    review_api_url: str
    review_api_key: str

    # Platform tokens
    github_token: str | None = None
    bitbucket_token: str | None = Field(
        default=None, validation_alias=AliasChoices("bitbucket_token", "bot_password")
    )
    ado_personal_access_token: str | None = None

    # Comment formatting
    include_machine_block_inline: bool = Field(
        default=True,
        validation_alias=AliasChoices("include_machine_block_inline", "include_ai_assist_inline"),
    )
    include_machine_block_in_summary: bool = Field(
        default=False,
        validation_alias=AliasChoices("include_machine_block_in_summary", "include_ai_assist_summary"),
    )
    max_code_block_width: int = Field(
        default=100,
        gt=0,
        validation_alias=AliasChoices("max_code_block_width", "max_line_width"),
    )

    # Run behaviour
    gate_context: str = "Code Review"
    request_timeout: float = 30.0
    review_timeout: float = 600.0
    max_concurrent_posts: int = 4
    log_level: str = "INFO"

    def render_config(self) -> RenderConfig:
        return RenderConfig(
            include_machine_block_inline=self.include_machine_block_inline,
            include_machine_block_in_summary=self.include_machine_block_in_summary,
            max_code_block_width=self.max_code_block_width,
        )
