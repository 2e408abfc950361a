EVALUATOR_SYSTEM_PROMPT = "You are a quiz answer evaluator. Your job is to check if the player's answer is correct."


def get_answer_evaluation_prompt(question: str, expected_answer: str, player_answer: str) -> str:
    """Build the grading prompt for one answer."""
    return f"""Question: {question}
Correct Answer: {expected_answer}
Player's Answer: {player_answer}

STEP 1 - VERIFY ANSWER FITS THE QUESTION:
First, check if the player's answer logically fits the question being asked.
- If the question asks for a person/character and the answer is a person/character: OK
- If the question asks for a place and the answer is a place: OK
- If the answer doesn't fit the question type at all: is_correct = false

STEP 2 - CHECK FOR CHARACTER/PERSON ALIASES:
If the answer refers to a person, character, or entity, check whether the player's answer is an
ALTERNATIVE NAME for the same person/character.
- Birth name = title/known name (e.g. "Edmond Dantès" = "The Count of Monte Cristo")
- Pen name, stage name, nickname, maiden name = real name (e.g. "Mark Twain" = "Samuel Clemens")
- If they refer to the SAME person/character: is_correct = true (word count doesn't matter for aliases)

STEP 3 - If NOT a person/character alias, apply the word count rule:
If the correct answer has 2+ words AND the player's answer has only 1 word AND it is NOT an alternative
name for the same entity: is_correct = false
Examples that are WRONG (partial answers, not aliases):
- "Suicide Squad" -> "Suicide"
- "Eiffel Tower" -> "Tower"

STEP 4 - If the word count is OK, check whether the meaning matches:
- Allow spelling mistakes, synonyms, translations, transliterations
- "Отряд самоубийц" = "Suicide Squad" is CORRECT

Give a confidence between 0.0 and 1.0 and a brief explanation in the same language as the question."""
