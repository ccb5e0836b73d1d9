"""
Extraction Prompts - Instructions sent to the vision model.

The prompt is an external contract with the model, not control flow.
Bump PROMPT_VERSION whenever the wording changes so that logs can be
correlated with the instructions that produced a reply.
"""

from dataclasses import dataclass

PROMPT_VERSION = "2024-11-worksheet-v3"


@dataclass(frozen=True)
class ExtractionPrompts:
    """
    Collection of prompts used by the extraction gateway.

    Only one task exists today: reading a grid worksheet.
    """
    version: str = PROMPT_VERSION

    @staticmethod
    def worksheet_grid() -> str:
        """Prompt to read a Traditional Chinese vocabulary worksheet."""
        return """
Analyze this TRADITIONAL CHINESE (繁體字) vocabulary worksheet image and extract the unique words from the grid/table.

CONTEXT:
The worksheet is written in Traditional Chinese characters (繁體字), as used in Hong Kong, Taiwan and Macau.
Recognize and preserve these characters exactly as they appear.

PROCESS:
1. Read the worksheet title/heading at the top (e.g. "形容詞篇", "動物篇").
2. Find the grid/table that holds the vocabulary words.
3. Go through EACH cell ONE BY ONE, left to right, top to bottom.
4. Each cell holds ONE vocabulary word. Extract it.
5. Keep track of the words already extracted and never add the same word twice.
6. Count the cells and make sure you return that many UNIQUE words.

CHARACTER REQUIREMENTS:
- Output Traditional Chinese characters ONLY (繁體字).
- DO NOT convert to Simplified Chinese (简体字).
- Traditional forms look like: 長 動 詞 綠 藍 紅 動物 形容詞
- These are Simplified and must NOT appear: 长 动 词 绿 蓝 红 动物 形容词

UNIQUENESS REQUIREMENTS:
- Each cell holds a different word; the worksheet has no duplicates.
- If two cells look the same, look again - they are probably different words.
- Check the final list and remove any duplicates before answering.

IGNORE:
- Handwritten English notes (like "short", "flat", "fat")
- Numbers, checkmarks, grid borders and instructional text
- Teacher notes and dates at the bottom

Return a single JSON object with exactly this format:
{
  "title": "worksheet title in TRADITIONAL Chinese",
  "words": ["詞語1", "詞語2", "詞語3"]
}

Return ONLY the JSON object, no other text.
""".strip()
