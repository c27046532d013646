from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSubscriptionSettings(BaseModel):
    """One Google Pub/Sub subscription to attach to."""

    name: str
    project: str
    json_path: str | None = None
    ack_deadline_seconds: int = Field(10, ge=1, le=600)
    template_path: str | None = None
    enabled: bool = True


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    pubsub_type: str = Field("google", validation_alias="PUBSUB_TYPE")
    google_subscriptions: list[GoogleSubscriptionSettings] = Field(
        default_factory=list,
        validation_alias="GOOGLE_SUBSCRIPTIONS",
    )

    # When false, an unreadable credentials file is logged and the subscriber is
    # built anyway; it then fails to authenticate against the broker.
    credentials_strict: bool = Field(True, validation_alias="CREDENTIALS_STRICT")

    node_identity_host: str = Field("www.google.com", validation_alias="NODE_IDENTITY_HOST")
    node_identity_port: int = Field(80, validation_alias="NODE_IDENTITY_PORT")
    node_identity_timeout_seconds: float = Field(2.0, validation_alias="NODE_IDENTITY_TIMEOUT_SECONDS")

    stop_timeout_seconds: float = Field(30.0, validation_alias="STOP_TIMEOUT_SECONDS")
    message_lock_backend: str = Field("inmemory", validation_alias="MESSAGE_LOCK_BACKEND")
