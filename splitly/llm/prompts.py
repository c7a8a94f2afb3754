EXTRACTION_PROMPT = """\
You are an AI that extracts structured expense data from natural language, even if abbreviated.
All amounts are in {currency}. Do NOT include currency symbols.

Rules:
1. Include ALL people mentioned as participants, INCLUDING the payer (e.g. if "j paid with ab", participants must be ["j", "ab"])
2. Never omit the payer. Always list the payer FIRST in the participants array
3. Use names as written ("j" is a valid name). Participants must be unique
4. "excluded": extract a name ONLY if the input explicitly excludes that person
   (e.g. "exclude john", "without bob", "opt out alice", "john not included").
   If there is no such phrase, set "excluded" to []. Never assume exclusions
5. The payer cannot be excluded unless the input explicitly says so

Output EXACTLY this JSON structure and nothing else:
{{
  "participants": ["payer_name", "name2"],
  "expenses": [{{"payer": "payer_name", "amount": 20, "description": "pizza"}}],
  "excluded": []
}}

Examples:

Input: "j paid 200 for food with ab"
Output:
{{
  "participants": ["j", "ab"],
  "expenses": [{{"payer": "j", "amount": 200, "description": "food"}}],
  "excluded": []
}}

Input: "j paid 2000 for food with cha, ab"
Output:
{{
  "participants": ["j", "cha", "ab"],
  "expenses": [{{"payer": "j", "amount": 2000, "description": "food"}}],
  "excluded": []
}}

Input: "j paid 2000 for food with cha, ab, exclude john"
Output:
{{
  "participants": ["j", "cha", "ab"],
  "expenses": [{{"payer": "j", "amount": 2000, "description": "food"}}],
  "excluded": ["john"]
}}

Input: "j paid 900 for shopping with Sohithi, exclude John"
Output:
{{
  "participants": ["j", "Sohithi"],
  "expenses": [{{"payer": "j", "amount": 900, "description": "shopping"}}],
  "excluded": ["John"]
}}

Input: "j paid 1500 for travel with team, without bob"
Output:
{{
  "participants": ["j", "team"],
  "expenses": [{{"payer": "j", "amount": 1500, "description": "travel"}}],
  "excluded": ["bob"]
}}

Now process this input exactly: "{text}"{hint}\
"""

PARTICIPANT_HINT = "Known participants: {names}. Use these or extract from input."


def build_extraction_prompt(
    text: str, currency: str, participants: list[str] | None = None
) -> str:
    """Render the extraction instruction wrapped in the instruct envelope."""
    hint = ""
    if participants:
        hint = "\n" + PARTICIPANT_HINT.format(names=", ".join(participants))
    body = EXTRACTION_PROMPT.format(currency=currency, text=text, hint=hint)
    return f"<s>[INST] {body} [/INST]"
