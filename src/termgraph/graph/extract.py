from __future__ import annotations

import re

from .nodes import Group, Leaf, Node

# Very small, local-first tagger so documents can be ingested without an NLP
# stack. Any callable returning Leaf/Group sequences can replace it.
_WORD_RE = re.compile(r"[A-Za-z][A-Za-z'-]*|\d+(?:\.\d+)?")

# Function words; recorded as filtered leaves so they never enter the graph.
_STOP = {
    "a",
    "an",
    "and",
    "are",
    "as",
    "at",
    "be",
    "been",
    "but",
    "by",
    "can",
    "do",
    "for",
    "from",
    "had",
    "has",
    "have",
    "he",
    "her",
    "his",
    "i",
    "if",
    "in",
    "into",
    "is",
    "it",
    "its",
    "me",
    "my",
    "no",
    "not",
    "of",
    "on",
    "or",
    "our",
    "she",
    "so",
    "that",
    "the",
    "their",
    "there",
    "these",
    "they",
    "this",
    "those",
    "to",
    "was",
    "we",
    "were",
    "what",
    "when",
    "where",
    "who",
    "why",
    "will",
    "with",
    "you",
    "your",
}

# Checked in order; first match wins.
_SUFFIX_TAGS = (
    ("ly", "adv"),
    ("ing", "verb"),
    ("ed", "verb"),
    ("ous", "adj"),
    ("ful", "adj"),
    ("ive", "adj"),
    ("able", "adj"),
    ("ible", "adj"),
    ("less", "adj"),
    ("ic", "adj"),
    ("al", "adj"),
)


def guess_tag(word: str) -> str:
    if word[0].isdigit():
        return "num"
    w = word.lower()
    for suffix, tag in _SUFFIX_TAGS:
        # Require a stem of at least three letters: "fly" is not an adverb.
        if w.endswith(suffix) and len(w) - len(suffix) >= 3:
            return tag
    return "noun"


def _is_capitalized(word: str) -> bool:
    return word[0].isupper() and word.lower() not in _STOP


def tag_text(text: str) -> list[Node]:
    """Tokenize and tag `text` into a node sequence.

    Runs of two or more capitalized words ("New York") become a Group whose
    `orig` is the whole phrase and whose children are the words. Stop words
    become filtered leaves.
    """
    words = _WORD_RE.findall(text)
    out: list[Node] = []
    run: list[str] = []

    def flush_run() -> None:
        if len(run) == 1:
            out.append(Leaf(tag="noun", term=run[0]))
        elif run:
            phrase = " ".join(run)
            out.append(
                Group(
                    orig=Leaf(tag="noun", term=phrase),
                    children=tuple(Leaf(tag="noun", term=w) for w in run),
                )
            )
        run.clear()

    for word in words:
        if _is_capitalized(word):
            run.append(word)
            continue

        flush_run()
        if word.lower() in _STOP:
            out.append(Leaf(tag="stop", term=word, filtered=True))
        else:
            out.append(Leaf(tag=guess_tag(word), term=word))

    flush_run()
    return out
