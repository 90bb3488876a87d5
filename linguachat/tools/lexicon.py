"""Static lookup tables behind the practice tools.

Wrapped in ``MappingProxyType`` so nothing can mutate them at runtime.
"""

from __future__ import annotations

from types import MappingProxyType

WORD_DEFINITIONS = MappingProxyType({
    "hello": MappingProxyType({
        "definition": "A greeting used when meeting someone or answering the telephone",
        "synonyms": ("hi", "greetings", "hey"),
        "examples": ("Hello, how are you?", "She said hello to her neighbor"),
    }),
    "goodbye": MappingProxyType({
        "definition": "A farewell remark",
        "synonyms": ("farewell", "bye", "see you later"),
        "examples": ("Goodbye! See you tomorrow.", "He waved goodbye from the train."),
    }),
    "thank": MappingProxyType({
        "definition": "To express gratitude to someone",
        "synonyms": ("appreciate", "acknowledge", "be grateful"),
        "examples": (
            "Thank you for your help.",
            "I want to thank everyone who supported me.",
        ),
    }),
})

PHONETICS = MappingProxyType({
    "hello": "/həˈloʊ/ - HEH-loh",
    "goodbye": "/ɡʊdˈbaɪ/ - GOOD-bye",
    "thank": "/θæŋk/ - THANK",
    "you": "/juː/ - YOO",
    "please": "/pliːz/ - PLEEZ",
    "sorry": "/ˈsɔːri/ - SOR-ree",
    "yes": "/jes/ - YES",
    "no": "/noʊ/ - NOH",
    "water": "/ˈwɔːtər/ - WAH-ter",
    "love": "/lʌv/ - LUV",
})

PLACEHOLDER_PHONETIC = "/fəˈnetɪk/"

QUIZ_BANK = MappingProxyType({
    "beginner": (
        "What does 'hello' mean?",
        "Choose the correct spelling: A) Thenk you B) Thank you C) Thankyu",
        "What is the opposite of 'good'?",
    ),
    "intermediate": (
        "What does 'appreciate' mean?",
        "Choose the best synonym for 'important': A) Crucial B) Small C) Easy",
        "Complete: 'I _____ to the store yesterday' A) go B) went C) going",
    ),
    "advanced": (
        "What does 'exacerbate' mean?",
        "Choose the most appropriate word: The situation was _____ complex "
        "A) incredibly B) incredible C) incredulous",
        "Explain the difference between 'affect' and 'effect'",
    ),
})

DEFAULT_QUIZ_LEVEL = "beginner"
