"""Request payload models."""

from pydantic import BaseModel, ConfigDict, Field


class CredentialsRequest(BaseModel):
    """Email/password body for signup and login."""

    email: str = ""
    password: str = ""


class EnhanceRequest(BaseModel):
    """Body for prompt enhancement."""

    prompt: str = ""


class GenerateRequest(BaseModel):
    """Body for image generation."""

    model_config = ConfigDict(populate_by_name=True)

    prompt: str = ""
    enhanced_prompt: str | None = Field(default=None, alias="enhancedPrompt")


class SaveGenerationRequest(BaseModel):
    """Body for recording an already generated image."""

    model_config = ConfigDict(populate_by_name=True)

    prompt: str | None = None
    enhanced_prompt: str | None = Field(default=None, alias="enhancedPrompt")
    image_url: str | None = Field(default=None, alias="imageUrl")
