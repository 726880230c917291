"""OpenAI client for prompt enhancement and image generation."""

import base64
from dataclasses import dataclass

from openai import AsyncOpenAI

from adcraft.services.generation import GenerationClient

ENHANCEMENT_INSTRUCTIONS = (
    "You are an expert prompt-enhancer for an AI image generator. "
    "The user describes a beauty or cosmetic product ad. "
    "Rewrite the prompt to be more detailed, specific and visually descriptive, "
    "covering style, mood, composition, lighting, colors and atmosphere. "
    "Return ONLY the enhanced prompt, no other text."
)


@dataclass
class OpenAIGenerationClient(GenerationClient):
    """Generation client backed by the OpenAI Responses and Images APIs."""

    client: AsyncOpenAI
    text_model: str
    image_model: str
    image_size: str = "1024x1024"

    @classmethod
    def create(
        cls,
        api_key: str,
        text_model: str,
        image_model: str,
        image_size: str = "1024x1024",
    ) -> "OpenAIGenerationClient":
        """Create an OpenAI generation client."""
        return cls(
            client=AsyncOpenAI(api_key=api_key),
            text_model=text_model,
            image_model=image_model,
            image_size=image_size,
        )

    async def enhance_prompt(self, prompt: str) -> str:
        """Ask the text model for a richer prompt."""
        response = await self.client.responses.create(
            model=self.text_model,
            instructions=ENHANCEMENT_INSTRUCTIONS,
            input=prompt,
            store=False,
        )
        output_text = (response.output_text or "").strip()
        if not output_text:
            raise RuntimeError("OpenAI returned an empty enhancement")
        return output_text

    async def generate_image(self, prompt: str) -> bytes:
        """Generate a PNG and return its bytes."""
        response = await self.client.images.generate(
            model=self.image_model,
            prompt=prompt,
            size=self.image_size,
            n=1,
        )
        image_b64 = response.data[0].b64_json if response.data else None
        if not image_b64:
            raise RuntimeError("OpenAI returned no image data")
        return base64.b64decode(image_b64)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
