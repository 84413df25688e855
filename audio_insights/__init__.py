"""Audio Insights: AssemblyAI transcription and audio intelligence CLI.

WHY: Getting a transcript plus entities, sentiment, topic categories and
chapters out of AssemblyAI takes three HTTP calls and a polling loop. This
package wraps that workflow behind one command that leaves a single JSON
document on disk.

HOW: Linear pipeline: upload (API client), submit, poll, then materialize
(console summary + JSON file). Each stage is independently testable.

RULES:
- One audio file per invocation, no concurrency
- The persisted document is the provider's response, unmodified
"""

__version__ = "0.1.0"
