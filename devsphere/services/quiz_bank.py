"""Static seed questions used to assemble quizzes without calling the language model."""

from __future__ import annotations

from typing import Dict, List

from ..domain.models import QuizQuestion

DEFAULT_LANGUAGE = "java"
DEFAULT_QUIZ_LENGTH = 40

SEED_QUESTIONS: Dict[str, List[QuizQuestion]] = {
    "java": [
        QuizQuestion(
            question="Which declaration creates an integer variable in Java?",
            options=["var x := 10;", "int x = 10;", "x = int(10);", "integer x = 10;"],
            correct_answer=1,
            explanation="Java declarations name the type first: 'int x = 10;'.",
        ),
        QuizQuestion(
            question="Which keyword makes a class inherit from another class?",
            options=["implements", "extends", "inherits", "super"],
            correct_answer=1,
            explanation="'extends' subclasses a class; 'implements' is for interfaces.",
        ),
        QuizQuestion(
            question="What does the 'final' modifier do on a local variable?",
            options=[
                "Makes it static",
                "Prevents reassignment",
                "Frees it after use",
                "Makes it thread-safe",
            ],
            correct_answer=1,
            explanation="A final variable can be assigned exactly once.",
        ),
    ],
    "python": [
        QuizQuestion(
            question="Which literal creates an empty list?",
            options=["{}", "[]", "()", "<>"],
            correct_answer=1,
            explanation="Square brackets build a list; '{}' is an empty dict.",
        ),
        QuizQuestion(
            question="What does print(2 ** 3) output?",
            options=["6", "8", "9", "An error"],
            correct_answer=1,
            explanation="'**' is exponentiation, so 2 ** 3 == 8.",
        ),
        QuizQuestion(
            question="Which statement handles an exception?",
            options=["try/except", "try/catch", "do/rescue", "begin/ensure"],
            correct_answer=0,
            explanation="Python catches exceptions with try/except blocks.",
        ),
    ],
    "typescript": [
        QuizQuestion(
            question="How do you annotate a variable as a number?",
            options=["let x: number = 5;", "let x = number(5);", "int x = 5;", "x := 5"],
            correct_answer=0,
            explanation="Type annotations follow the name after a colon.",
        ),
        QuizQuestion(
            question="Which tsconfig option enables all strict type checks?",
            options=['"strict": true', '"use strict"', '"types": "strict"', '"checkAll": true'],
            correct_answer=0,
            explanation='Setting "strict": true turns on the whole strict family.',
        ),
        QuizQuestion(
            question="Which type accepts any value but forces narrowing before use?",
            options=["any", "unknown", "never", "object"],
            correct_answer=1,
            explanation="'unknown' is the type-safe counterpart of 'any'.",
        ),
    ],
    "javascript": [
        QuizQuestion(
            question="Which function turns a JSON string into an object?",
            options=["JSON.toObject", "JSON.parse", "Object.fromJSON", "parseJSON"],
            correct_answer=1,
            explanation="JSON.parse decodes a JSON string.",
        ),
        QuizQuestion(
            question="What does typeof null return?",
            options=["'null'", "'object'", "'undefined'", "'number'"],
            correct_answer=1,
            explanation="A long-standing quirk: typeof null is 'object'.",
        ),
        QuizQuestion(
            question="Which keyword declares a block-scoped variable that can be reassigned?",
            options=["var", "let", "const", "static"],
            correct_answer=1,
            explanation="'let' is block-scoped and reassignable; 'const' is not reassignable.",
        ),
    ],
    "html": [
        QuizQuestion(
            question="Which element defines a hyperlink?",
            options=["<link>", "<a>", "<href>", "<url>"],
            correct_answer=1,
            explanation="The anchor element <a> creates hyperlinks.",
        ),
        QuizQuestion(
            question="Which attribute gives an <img> its source?",
            options=["href", "src", "alt", "title"],
            correct_answer=1,
            explanation="'src' points to the image resource.",
        ),
        QuizQuestion(
            question="Which element holds the document's metadata?",
            options=["<meta>", "<head>", "<header>", "<body>"],
            correct_answer=1,
            explanation="<head> contains title, meta and link elements.",
        ),
    ],
    "css": [
        QuizQuestion(
            question="Which property sets the main axis of a flex container?",
            options=["flex-direction", "direction", "flex-flow-axis", "justify-content"],
            correct_answer=0,
            explanation="flex-direction chooses row or column layout.",
        ),
        QuizQuestion(
            question="How is a class selector written?",
            options=[".card { }", "#card { }", "card { }", "*card { }"],
            correct_answer=0,
            explanation="Class selectors start with a dot.",
        ),
        QuizQuestion(
            question="Which unit is relative to the root element's font size?",
            options=["em", "rem", "px", "vh"],
            correct_answer=1,
            explanation="'rem' scales with the <html> font size.",
        ),
    ],
    "csharp": [
        QuizQuestion(
            question="Which keyword declares a reference type in C#?",
            options=["class", "struct", "type", "object"],
            correct_answer=0,
            explanation="Classes are reference types; structs are value types.",
        ),
        QuizQuestion(
            question="Which modifier limits a member to its containing type?",
            options=["public", "private", "protected", "internal"],
            correct_answer=1,
            explanation="'private' members are only visible inside the type.",
        ),
        QuizQuestion(
            question="Which keyword awaits an asynchronous Task?",
            options=["yield", "await", "defer", "sync"],
            correct_answer=1,
            explanation="'await' suspends until the Task completes.",
        ),
    ],
    "go": [
        QuizQuestion(
            question="Which keyword declares a function in Go?",
            options=["func", "function", "def", "fn"],
            correct_answer=0,
            explanation="Go functions are declared with 'func'.",
        ),
        QuizQuestion(
            question="What is the zero value of an int?",
            options=["1", "0", "nil", "undefined"],
            correct_answer=1,
            explanation="Numeric types default to 0.",
        ),
        QuizQuestion(
            question="Which statement starts a goroutine?",
            options=["go f()", "async f()", "spawn f()", "thread f()"],
            correct_answer=0,
            explanation="Prefixing a call with 'go' runs it concurrently.",
        ),
    ],
}


def supported_languages() -> List[str]:
    return sorted(SEED_QUESTIONS)


def is_supported(language: str) -> bool:
    return language in SEED_QUESTIONS


def synthesize(seed: List[QuizQuestion], total: int = DEFAULT_QUIZ_LENGTH) -> List[QuizQuestion]:
    """Build ``total`` questions by cycling through ``seed``."""
    if not seed:
        return []
    return [seed[index % len(seed)].copy() for index in range(total)]
