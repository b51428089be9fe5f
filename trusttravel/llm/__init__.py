"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Build prompts from the travel plan and the ranked places.
- Ask the Groq LLM for a one-sentence reason per place.
- Fall back to template reasons when the LLM is unavailable or returns invalid output.

The LLM only explains; it never changes the order the engine produced.
"""
