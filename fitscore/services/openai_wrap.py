"""Candidate profile analysis through the OpenAI Responses HTTP API.

The API is called with ``requests`` directly rather than the ``openai`` SDK,
so the only moving part is the JSON shape of the response.
"""

import random
import time
from typing import Iterable

import requests
from flask import current_app

RESPONSES_URL = 'https://api.openai.com/v1/responses'


class AnalysisError(Exception):
    """The analysis service could not produce a result."""


def build_prompt(name: str, seniority: str, skills: Iterable[str], profile_summary: str) -> str:
    lines = [
        "You are a technical recruiter. Analyse the candidate below in at most 120 words.",
        "Point out strengths, gaps and one question worth asking in an interview.",
        "--",
        f"Name: {name}",
        f"Seniority: {seniority}",
        f"Skills: {', '.join(skills) or '-'}",
        "Profile summary:",
        profile_summary or '(empty)',
    ]
    return "\n".join(lines)


def extract_text(jr) -> str:
    """Pull the generated text out of a Responses API payload."""
    if not isinstance(jr, dict):
        return ''
    text = jr.get('output_text') or ''
    if text:
        return text.strip()
    parts = []
    for item in jr.get('output') or []:
        if isinstance(item, dict):
            for c in item.get('content', []):
                if isinstance(c, dict) and 'text' in c:
                    parts.append(c['text'])
                elif isinstance(c, str):
                    parts.append(c)
        elif isinstance(item, str):
            parts.append(item)
    return '\n'.join(parts).strip()


def analyze_profile(name: str, seniority: str, skills: Iterable[str], profile_summary: str) -> str:
    """Return a free-text analysis of a candidate profile.

    Rate limits and 5xx responses are retried with exponential backoff up to
    OPENAI_MAX_ATTEMPTS; anything else, or running out of attempts, raises
    AnalysisError.
    """
    api_key = current_app.config.get('OPENAI_API_KEY')
    if not api_key:
        raise AnalysisError('OPENAI_API_KEY is not configured')

    headers = {'Authorization': f'Bearer {api_key}', 'Content-Type': 'application/json'}
    body = {
        'model': current_app.config.get('OPENAI_MODEL', 'gpt-4o-mini'),
        'input': build_prompt(name, seniority, list(skills), profile_summary),
        'max_output_tokens': 400,
        'temperature': 0.3,
    }
    timeout = current_app.config.get('OPENAI_TIMEOUT', 30)
    max_attempts = max(1, int(current_app.config.get('OPENAI_MAX_ATTEMPTS', 3)))

    backoff = 1.0
    for attempt in range(1, max_attempts + 1):
        try:
            r = requests.post(RESPONSES_URL, headers=headers, json=body, timeout=timeout)
        except requests.exceptions.RequestException as e:
            if attempt == max_attempts:
                raise AnalysisError(f'OpenAI request failed: {e}') from e
            current_app.logger.warning('OpenAI network error, attempt %s/%s, retrying in %ss', attempt, max_attempts, backoff)
            time.sleep(backoff + random.uniform(0, 0.5))
            backoff *= 2
            continue

        if r.status_code == 429 or r.status_code >= 500:
            body_text = r.text or ''
            if 'insufficient_quota' in body_text:
                raise AnalysisError('OpenAI quota exhausted')
            if attempt == max_attempts:
                raise AnalysisError(f'OpenAI returned {r.status_code} after {max_attempts} attempts')
            try:
                wait = float(r.headers.get('Retry-After') or backoff)
            except ValueError:
                wait = backoff
            current_app.logger.warning('OpenAI returned %s, attempt %s/%s, retrying in %ss', r.status_code, attempt, max_attempts, wait)
            time.sleep(wait + random.uniform(0, 0.5))
            backoff *= 2
            continue

        if r.status_code >= 400:
            raise AnalysisError(f'OpenAI HTTP error {r.status_code}: {(r.text or "")[:500]}')

        try:
            text = extract_text(r.json())
        except ValueError as e:
            raise AnalysisError('OpenAI returned a non-JSON body') from e
        if not text:
            raise AnalysisError('OpenAI returned an empty analysis')
        return text

    raise AnalysisError('OpenAI analysis did not run')
