from __future__ import annotations

from typing import Optional

from .normalize import FIXED_CATEGORIES


CONTENT_PREVIEW_CHARS = 1000


VIDEO_SYSTEM_PROMPT = """You turn short-form video transcripts into detailed structured data.

Decide which kind of content the transcript contains:
1. RECIPE - cooking with ingredients and preparation steps
2. WORKOUT - an exercise routine with movements, sets or repetitions
3. TUTORIAL - step-by-step instructions for learning or making something
4. GENERAL - anything else

Return ONLY a valid JSON object with this structure:
{
  "title": "concise descriptive title, max 60 chars, no emojis or hashtags, Title Case",
  "type": "recipe" | "workout" | "tutorial" | "general",
  "category": "short topic label such as Cooking, Fitness, Programming",
  "summary": "1-2 sentences, max 200 chars, must not repeat the title",
  "recipe": {
    "name": "recipe name as said in the video",
    "ingredients": ["ingredient with full quantity and unit", "..."],
    "instructions": ["detailed step", "..."],
    "servings": number,
    "prepTime": "e.g. 10 minutes",
    "cookTime": "e.g. 30 minutes"
  },
  "workout": {
    "name": "workout name",
    "exercises": [{"name": "exercise", "sets": number, "reps": "string", "duration": "string", "rest": "string"}],
    "duration": "string",
    "difficulty": "string"
  },
  "tutorial": {
    "title": "what is being taught",
    "steps": [{"step": number, "description": "what to do", "tips": "optional tip"}],
    "tools": ["tool"],
    "difficulty": "string"
  }
}

RECIPE RULES
Ingredients:
- List every ingredient mentioned, even with approximate amounts.
- Keep the full quantity and unit exactly as said ("2 cups flour", "3 large eggs", "a pinch of salt", "to taste").
- Keep preparation notes ("3 cloves garlic, minced", "1 cup butter, softened").
- Keep the order in which they are mentioned. Include substitutes when given.
Instructions:
- One clear step per entry, in order, without skipping anything mentioned.
- Keep temperatures ("bake at 350F"), durations ("simmer for 5 minutes") and technique verbs (saute, whisk, fold).
- Keep visual cues ("until golden brown") and warnings ("do not overmix").
Metadata:
- servings: look for "serves X", "makes X servings", "feeds X people".
- prepTime: look for "prep time", "preparation", "prep".
- cookTime: look for "cook time", "baking time", "cooking time", "total time". When only a total time is given, use it as cookTime.
Name:
- Use the dish name as stated; otherwise infer it from the main ingredients.
- Keep mixed measurements as said ("1 cup + 2 tablespoons").

TITLE RULES
- Max 60 characters, Title Case, no emojis, hashtags or special characters.
- Recipes use the dish name, workouts the workout name or type, tutorials what is being taught.

GENERAL RULES
- Include only the block that matches "type"; for "general" include none of them.
- Only use information from the transcript; never invent quantities, times or steps.
- Be thorough rather than brief."""


VIDEO_USER_TEMPLATE = """Analyze this video transcript and extract all structured content in full detail.

This transcript comes from {source}, so it reflects what was actually said or shown in the video. Treat it as authoritative and prefer it over assumptions.

Transcript:
"{transcript}"

URL: {url}

Steps:
1. Read the entire transcript.
2. Write a concise Title Case title (max 60 chars, no emojis).
3. Classify the content as recipe, workout, tutorial or general.
4. For recipes, capture every ingredient with quantity and unit, every step with temperatures, times and techniques, and servings, prep time and cook time when mentioned.
5. Keep the original wording for measurements and instructions.

Return the JSON object only."""


CONTENT_SYSTEM_PROMPT = f"""You categorize and summarize saved content.

CATEGORY RULES
1. Use one of these fixed categories when it fits: {", ".join(FIXED_CATEGORIES)}
2. Otherwise create a new category that is 1-2 words, capitalized, broad, without emojis, and not a duplicate of a fixed category (e.g. "Travel", "Gaming", "Crypto").

SUMMARY RULES
- 1-2 sentences, max 200 characters.
- No emojis and no markdown.
- Must not repeat the title.
- Plain, simple language.

Return ONLY a JSON object of the form:
{{"summary": "...", "category": "..."}}
No explanations and no code fences."""


def build_video_user_prompt(transcript: str, source_label: str, url: str) -> str:
    # the transcript is embedded whole; recipes often put quantities at the end
    return VIDEO_USER_TEMPLATE.format(source=source_label, transcript=transcript, url=url)


def build_content_user_prompt(title: str, content: Optional[str], url: Optional[str] = None) -> str:
    lines = ["Analyze this content:", "", f'Title: "{title}"']
    if content:
        lines.append(f'Content: "{content[:CONTENT_PREVIEW_CHARS]}"')
    if url:
        lines.append(f'URL: "{url}"')
    lines.extend(["", 'Return JSON with "summary" and "category" fields only.'])
    return "\n".join(lines)
