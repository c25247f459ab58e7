"""Keyword based sentiment classification.

Matching is plain substring containment on the lower-cased text, without
tokenization or stemming, so "badge" counts as containing "bad".
"""

from .chat_models import Sentiment

POSITIVE_WORDS = (
    "happy", "love", "great", "awesome", "wonderful",
    "excellent", "amazing", "fantastic", "good", "nice",
)
NEGATIVE_WORDS = (
    "sad", "angry", "bad", "terrible", "awful",
    "hate", "horrible", "disgusting", "worst", "annoying",
)


def classify_sentiment(text: str) -> Sentiment:
    """Classify text as positive, negative or neutral.

    :param text: The message text
    :return: POSITIVE if only positive words occur, NEGATIVE if only negative
        words occur, NEUTRAL if both or neither occur
    """
    lower_text = text.lower()
    has_positive = any(word in lower_text for word in POSITIVE_WORDS)
    has_negative = any(word in lower_text for word in NEGATIVE_WORDS)

    if has_positive and not has_negative:
        return Sentiment.POSITIVE
    if has_negative and not has_positive:
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL
