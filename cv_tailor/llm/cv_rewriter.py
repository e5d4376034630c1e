import json
import logging
import re
from typing import Any, Dict, Optional

from pydantic import ValidationError

from cv_tailor.core.exceptions import RewriteParseError
from cv_tailor.llm.claude_client import ClaudeClient
from cv_tailor.schemas.cv_tailor import PolishedContent, RewritePayload, SourceTemplate

logger = logging.getLogger(__name__)

REWRITE_SYSTEM_PROMPT = """
You are an expert CV writer, ATS optimizer, and recruiter. You rewrite CV content so it passes
ATS screening and appeals to human recruiters for one specific job. You must return ONLY a valid JSON object.
"""

REWRITE_USER_PROMPT = """
Make this candidate's CV pass ATS screening AND appeal to human recruiters by HEAVILY CUSTOMIZING it for the specific job.

ORIGINAL CV:
{cv_text}

JOB DESCRIPTION:
{job_description}

CRITICAL INSTRUCTIONS - CONCISE & IMPACTFUL:

**WRITING STYLE - Action-focused, impact-driven:**
- Write TIGHT, PUNCHY, FOCUSED content emphasizing RESULTS and IMPACT
- Lead with what you DID, follow with the measurable IMPACT
- Eliminate filler words: "in order to", "was able to", "responsible for", "helped to", "worked on"
- Use VARIED, strong action verbs - avoid repeating "Led", "Architected", "Built", "Developed"
- ALWAYS include numbers/metrics showing impact (revenue, %, users, time saved, etc.)
- Never use em dashes in any content
- Example BAD: "Responsible for product strategy and team management"
- Example GOOD: "Launched product strategy driving $5M revenue and 40% user growth"

1. **Professional Title & Summary** - Customize both for this role:
   - **Title**: Replace "{current_title}" with the exact job title from the posting
   - **Summary**: MAXIMUM 3 lines on page (50-60 words)
   - Include 3-5 critical keywords from the job posting

2. **Experience Bullets** - HEAVILY customize each:
   - Rewrite bullets using ACTION -> IMPACT structure
   - Use EXACT keywords from the job posting where truthful
   - Within each job section, bullets must address DIFFERENT aspects (don't repeat themes)
   - CRITICAL: Each bullet MUST be MAXIMUM 20-25 words
   - ALWAYS use "$" for currency (not "£" or other symbols)
   - Format: [Strong Verb] [What] [Impact with numbers]

3. **Skills Section** - STRICT ATS optimization requirements:
   - List ONLY 8-10 most relevant TECHNICAL/TOOL skills from the job description
   - Prioritize hard skills over soft skills
   - MUST fit on 2 lines maximum (approximately 120-140 characters total including separators)
   - Format: Skill | Skill | Skill with " | " separators

Return your response in this EXACT JSON format:
{{
  "title": "Exact job title from posting",
  "summary": "Heavily customized summary using job-specific keywords",
  "bullets": [
    {{
      "original": "The bullet text copied EXACTLY, character for character, from the original CV",
      "tailored": "Heavily customized bullet using job description language"
    }}
  ],
  "skills": "Only 8-10 skills (2 lines max)"
}}

Include ALL bullets from every role in the experience section. Return ONLY valid JSON, no additional text.
"""

POLISH_SYSTEM_PROMPT = """
You are a professional CV editor. You make tailored CV content natural and readable while keeping
every keyword and metric. You must return ONLY a valid JSON object.
"""

POLISH_USER_PROMPT = """
Review the following tailored CV content and make it more natural, readable, and less jargony while maintaining all keywords and metrics.

CONTENT TO POLISH:
Title: {title}
Summary: {summary}

Bullets:
{bullets}

Skills: {skills}

INSTRUCTIONS:
- Make the language flow naturally - avoid corporate buzzwords and jargon
- Maintain ALL numbers, metrics, and technical terms
- Keep ALL ATS keywords from the original
- Keep the same length or shorter, and the same number of bullets in the same order
- Don't add new information - just polish what's there

Return the polished content in this EXACT JSON format:
{{
  "title": "polished title",
  "summary": "polished summary",
  "bullets": ["polished bullet 1", "polished bullet 2"],
  "skills": "polished skills"
}}

Return ONLY valid JSON, no additional text.
"""


def parse_json_response(response: str) -> Optional[Dict[str, Any]]:
    """Parse a JSON object from Claude's response, handling markdown code blocks."""
    response = response.strip()
    if "```" in response:
        match = re.search(r'```(?:json)?\s*\n?([\s\S]*?)\n?\s*```', response)
        if match:
            response = match.group(1).strip()
        else:
            response = re.sub(r'^```(?:json)?\s*\n?', '', response)
            response = re.sub(r'\n?\s*```\s*$', '', response)
    try:
        parsed = json.loads(response)
    except json.JSONDecodeError as e:
        logger.warning(f"[JSON PARSE] First attempt failed: {e}")
        logger.warning(f"[JSON PARSE] Response start: {response[:200]}")
        match = re.search(r'(\{[\s\S]*\})', response)
        if not match:
            return None
        try:
            parsed = json.loads(match.group(1))
        except json.JSONDecodeError as e2:
            logger.warning(f"[JSON PARSE] Second attempt failed: {e2}")
            return None
    return parsed if isinstance(parsed, dict) else None


async def generate_rewrite(
    client: ClaudeClient,
    cv_text: str,
    job_description: str,
    template: SourceTemplate,
) -> RewritePayload:
    """
    First pass: ask Claude for a tailored title, summary, bullets and skills.
    Raises RewriteParseError when the answer isn't usable JSON.
    """
    user_prompt = REWRITE_USER_PROMPT.format(
        cv_text=cv_text,
        job_description=job_description,
        current_title=template.title,
    )
    response_text = await client.send_request(REWRITE_SYSTEM_PROMPT, user_prompt)

    data = parse_json_response(response_text)
    if data is None:
        logger.error(f"Failed to parse Claude response: {response_text[:500]}")
        raise RewriteParseError("Failed to parse AI response")

    try:
        payload = RewritePayload.model_validate(data)
    except ValidationError as e:
        logger.error(f"Claude response has unexpected shape: {e}")
        raise RewriteParseError(f"Failed to parse AI response: {e}") from e

    logger.info(f"[REWRITE] Received title, summary, {len(payload.bullets)} bullets and skills")
    return payload


async def polish_rewrite(client: ClaudeClient, payload: RewritePayload) -> RewritePayload:
    """
    Second pass: smooth the wording of a rewrite.
    Polished bullets are mapped back onto the rewrite by position. If the
    answer can't be parsed, the unpolished payload is returned as is.
    """
    user_prompt = POLISH_USER_PROMPT.format(
        title=payload.title,
        summary=payload.summary,
        bullets="\n".join(f"{i + 1}. {b.tailored}" for i, b in enumerate(payload.bullets)),
        skills=payload.skills,
    )
    response_text = await client.send_request(POLISH_SYSTEM_PROMPT, user_prompt)

    data = parse_json_response(response_text)
    if data is None:
        logger.warning("[POLISH] Failed to parse polish response, using original")
        return payload
    try:
        polished = PolishedContent.model_validate(data)
    except ValidationError as e:
        logger.warning(f"[POLISH] Polish response has unexpected shape, using original: {e}")
        return payload

    result = payload.model_copy(deep=True)
    result.title = polished.title
    result.summary = polished.summary
    result.skills = polished.skills
    for index, polished_bullet in enumerate(polished.bullets):
        if index < len(result.bullets):
            result.bullets[index].tailored = polished_bullet

    if len(polished.bullets) != len(payload.bullets):
        logger.warning(
            f"[POLISH] Bullet count changed ({len(payload.bullets)} -> {len(polished.bullets)}), "
            f"merged by position"
        )
    return result
