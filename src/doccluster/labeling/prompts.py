"""Prompt templates for cluster labeling."""

CLUSTER_LABEL_SYSTEM = "Generate a short, descriptive name and description for a document cluster. Return valid JSON only."

CLUSTER_LABEL_PROMPT = """These documents have been grouped together based on similarity:

{documents}

Respond in this exact JSON format:
{{
  "name": "a short, descriptive name for this cluster (2-4 words)",
  "description": "one sentence describing what these documents have in common",
  "keywords": ["3-5", "topic", "keywords"],
  "confidence": 0.0
}}

"confidence" is a number from 0.0 to 1.0 saying how cohesive the cluster is."""
