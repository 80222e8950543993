"""Pydantic settings for escalator configuration."""

from pathlib import Path
from typing import List, Optional

from pydantic import ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    # API Keys (Required)
    anthropic_api_key: str = Field(
        ..., description="Anthropic API key for Claude access"
    )
    github_token: Optional[str] = Field(
        default=None, description="GitHub personal access token for GitHub MCP"
    )

    # Azure Configuration (a cycle is skipped while these are missing)
    azure_tenant_id: Optional[str] = Field(default=None, description="Azure tenant ID")
    azure_subscription_id: Optional[str] = Field(
        default=None, description="Azure subscription ID"
    )
    resource_group: str = Field(
        default="rg-opsweaver-hackathon", description="Resource group of the target"
    )
    target_resource: str = Field(
        default="asp-cpuspiker-free-central",
        description="Name of the monitored resource",
    )
    resource_type: str = Field(
        default="Microsoft.Web/serverfarms", description="Azure resource type"
    )

    # Metric query
    monitor_tool: str = Field(default="monitor", description="MCP tool used for sampling")
    monitor_command: str = Field(
        default="monitor_metrics_query", description="Command passed to the monitor tool"
    )
    metric_names: str = Field(default="CpuPercentage", description="Metric to sample")
    metric_namespace: str = Field(
        default="Microsoft.Web/serverfarms", description="Azure metric namespace"
    )
    metric_interval: str = Field(default="PT5M", description="Bucket interval (ISO 8601)")
    metric_timespan: str = Field(default="PT1H", description="Query window (ISO 8601)")
    metric_aggregation: str = Field(default="Average", description="Metric aggregation")

    # Escalation
    health_threshold: float = Field(
        default=80.0, description="Values at or above this are unhealthy"
    )
    polling_interval_seconds: float = Field(
        default=60, gt=0, description="Seconds between monitoring cycles"
    )
    inconclusive_marker: str = Field(
        default="No root cause identified",
        description="Phrase that marks a diagnosis as inconclusive",
    )
    remediation_backends: List[str] = Field(
        default_factory=lambda: ["github"],
        description="Backends whose tools the fixer may use (empty = all)",
    )

    # GitHub context for the agents
    github_repository: str = Field(
        default="Bihela/opsweaver-test-ground", description="Companion code repository"
    )
    github_base_branch: str = Field(default="main", description="Pull request base branch")

    # Model Configuration
    agent_model: str = Field(
        default="claude-sonnet-4-5", description="Model used by investigator and fixer"
    )
    agent_max_turns: int = Field(default=30, gt=0, description="Max agent turns per session")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Path = Field(default=Path("logs/escalator.log"), description="Log file path")

    model_config = ConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def has_azure_credentials(self) -> bool:
        """Whether both Azure coordinates are configured."""
        return bool(self.azure_tenant_id and self.azure_subscription_id)

    def validate_api_keys(self) -> None:
        """Validate required API keys are set."""
        if not self.anthropic_api_key:
            raise ValueError("ANTHROPIC_API_KEY environment variable is required")

    def validate_log_level(self) -> None:
        """Validate the configured log level name."""
        if self.log_level.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid LOG_LEVEL: {self.log_level}")

    def validate_all(self) -> None:
        """Run all validations."""
        self.validate_api_keys()
        self.validate_log_level()
