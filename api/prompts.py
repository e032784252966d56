REWRITE_PROMPT_TEMPLATE = """You are an expert Endodontist's assistant.
Task: Rewrite the following rough notes into a professional, formal French dental report for a referring dentist.

Context:
- Patient: {patient_name}
- Tone: Professional, clinical, precise (use "nous", "il/elle").
- Output language: French ONLY.
- Do not add fake dates or fake names if not provided.
- Clean up grammar and logic flow.

Rough Notes:
"{notes}"
"""


def build_rewrite_prompt(notes: str, patient_name: str) -> str:
    return REWRITE_PROMPT_TEMPLATE.format(notes=notes, patient_name=patient_name)
