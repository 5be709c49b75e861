def count_words(text: str) -> int:
    # Cheap proxy for the completion model's token count. Only single spaces
    # separate words: "a  b" counts 3 and newlines/tabs do not split.
    return len(text.split(" "))
