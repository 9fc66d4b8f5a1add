"""Prompt builders for the summary and study-guide endpoints."""


def build_summary_prompt(text: str, max_words: int) -> str:
    return (
        f"Please provide a concise summary of the following text in about {max_words} words:\n\n"
        f"{text}"
    )


def build_study_guide_prompt(topic: str) -> str:
    return f"""Create a comprehensive study guide for the topic: "{topic}"
Please provide the response in the following JSON format:
{{
  "summary": "A brief overview of the topic (about 150 words)",
  "flashcards": [
    {{ "front": "Question/term", "back": "Answer/definition" }}
  ],
  "quizQuestions": [
    {{
      "question": "The question text",
      "options": ["Option A", "Option B", "Option C", "Option D"],
      "correctAnswer": "The correct option"
    }}
  ]
}}
Include at least 5 flashcards and at least 3 quiz questions.
Return only the JSON object.
"""
