#!/usr/bin/env python3
"""
Example script demonstrating streaming extraction with GenerateStep.

Replays a canned model response in small chunks so it runs offline, and
prints every partial value as soon as it can be shown.
"""

import asyncio

# Import using the package structure
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from trellis import ExtractionConfig, GenerateStep, GenerationHooks, Signature
from trellis.schemas import EnumField, NumberField, StringField

CANNED_RESPONSE = (
    "<summary>Sturdy, quiet and easy to clean, but the lid cracked after a month.</summary>\n"
    "<sentiment>mixed</sentiment>\n"
    "<score>6</score>"
)


class ReplayClient:
    """Streams a fixed response a few characters at a time."""

    def __init__(self, response: str, chunk_size: int = 7):
        self.response = response
        self.chunk_size = chunk_size

    async def stream(self, messages, **options):
        for i in range(0, len(self.response), self.chunk_size):
            await asyncio.sleep(0.02)
            yield self.response[i:i + self.chunk_size]


async def main():
    """Demonstrate field-by-field extraction from a streamed response."""

    config = ExtractionConfig(log_level="INFO")
    config.configure_logging()

    print("🌱 Trellis streaming extraction demo")
    print("=" * 60)

    signature = Signature(
        description="Summarize a product review",
        input_fields=[StringField(name="review")],
        output_fields=[
            StringField(name="summary", field_description="One sentence"),
            EnumField(name="sentiment", enum_value_set=["positive", "negative", "mixed"]),
            NumberField(name="score", is_optional=True, field_description="1-10"),
        ],
    )
    print(f"📝 Signature: {signature}")
    print(f"🔑 Hash:      {signature.content_hash[:16]}...")
    print()

    def show_delta(event):
        for name, value in event.delta.items():
            print(f"  [{name}] {value!r}")

    step = GenerateStep(
        name="summarize",
        signature=signature,
        client=ReplayClient(CANNED_RESPONSE),
        config=config,
        hooks=GenerationHooks(on_delta=show_delta),
    )

    result = await step.run([
        {"role": "user", "content": "Review: The blender is sturdy and quiet ..."},
    ])

    print()
    print(f"✅ Extracted after {result.attempts} attempt(s):")
    for name, value in result.values.items():
        print(f"   {name}: {value!r}")


if __name__ == "__main__":
    asyncio.run(main())
