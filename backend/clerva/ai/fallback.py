"""Canned study material served when no AI provider is reachable."""

from itertools import cycle, islice
from typing import Any

DEMO_SUMMARIES = [
    "This content covers key concepts in the specified subject area. The main topics "
    "include fundamental principles, practical applications, and important methodologies. "
    "Key takeaways focus on understanding core relationships and applying knowledge effectively.",
    "The material presents essential information structured around central themes. Important "
    "concepts are organized to facilitate learning and comprehension. The content emphasizes "
    "practical understanding and real-world application of theoretical knowledge.",
    "This summary captures the primary learning objectives and key points. The content is "
    "designed to build foundational understanding while introducing advanced concepts "
    "progressively. Focus areas include critical thinking and practical problem-solving.",
]

DEMO_CARDS = [
    ("What is the main concept covered?", "The fundamental principle that guides the subject matter"),
    ("Why is this topic important?", "It forms the foundation for advanced learning and practical application"),
    ("How does this connect to real-world scenarios?", "Through practical examples and case studies that demonstrate relevance"),
    ("What are the key takeaways?", "Critical thinking, problem-solving, and application of learned concepts"),
    ("How can this knowledge be applied?", "In contexts requiring analytical thinking and systematic approaches"),
]

DEMO_QUESTIONS: list[dict[str, Any]] = [
    {
        "type": "multiple-choice",
        "question": "What is the main focus of this study material?",
        "options": ["Theoretical concepts", "Practical applications", "Historical context", "All of the above"],
        "correct_answer": "All of the above",
        "explanation": "Comprehensive study material typically covers theory, practice, and context.",
    },
    {
        "type": "true-false",
        "question": "Understanding fundamental principles is crucial for advanced learning.",
        "options": ["True", "False"],
        "correct_answer": "True",
        "explanation": "Strong foundations enable better comprehension of complex topics.",
    },
    {
        "type": "short-answer",
        "question": "Explain one key benefit of active learning.",
        "options": None,
        "correct_answer": "Improved retention and understanding through engagement",
        "explanation": "Active learning promotes deeper understanding and better retention.",
    },
    {
        "type": "multiple-choice",
        "question": "Which study technique is most effective for long-term retention?",
        "options": ["Cramming", "Spaced repetition", "Passive reading", "Single sessions"],
        "correct_answer": "Spaced repetition",
        "explanation": "Spaced repetition helps transfer information to long-term memory.",
    },
    {
        "type": "true-false",
        "question": "Regular practice is more important than understanding theory.",
        "options": ["True", "False"],
        "correct_answer": "False",
        "explanation": "Both theory and practice are important for comprehensive learning.",
    },
]


def demo_summary(content: str) -> str:
    # Same input, same summary
    return DEMO_SUMMARIES[len(content) % len(DEMO_SUMMARIES)]


def demo_flashcards(count: int, difficulty: str) -> list[dict[str, Any]]:
    return [
        {"id": f"flashcard-{index}", "front": front, "back": back, "difficulty": difficulty}
        for index, (front, back) in enumerate(islice(cycle(DEMO_CARDS), count), start=1)
    ]


def demo_quiz(count: int, question_types: list[str]) -> list[dict[str, Any]]:
    pool = [q for q in DEMO_QUESTIONS if q["type"] in question_types] or DEMO_QUESTIONS
    return [
        {"id": f"question-{index}", **question}
        for index, question in enumerate(islice(cycle(pool), count), start=1)
    ]
