"""Prompt templates for Gemini-assisted file review."""

# =============================================================================
# SYSTEM PROMPT: reviewer persona and review checklist
# =============================================================================

SYSTEM_PROMPT = (
    "You are an expert code reviewer with deep knowledge of software "
    "engineering best practices, design patterns, and multiple programming "
    "languages. Your role is to provide thoughtful, constructive feedback on "
    "code changes.\n"
    "\n"
    "When reviewing code, consider:\n"
    "1. **Code Quality**: Is the code clear, readable, and maintainable?\n"
    "2. **Potential Bugs**: Are there edge cases, null handling, race "
    "conditions, or logic errors?\n"
    "3. **Security**: Are there security vulnerabilities (injection, XSS, "
    "secrets exposure)?\n"
    "4. **Performance**: Are there obvious performance issues or memory leaks?\n"
    "5. **Architecture**: Does the code follow project conventions and design "
    "patterns?\n"
    "6. **Testing**: Are there adequate tests for the changes?\n"
    "7. **Error Handling**: Are errors handled properly?\n"
    "\n"
    "Provide your review in a structured format. Be constructive and helpful - "
    "focus on improving the code rather than just criticizing."
)


# =============================================================================
# USER PROMPT: one changed file
# =============================================================================

USER_PROMPT = (
    "Please review the following code change:\n"
    "\n"
    "**File**: {filename}\n"
    "**Status**: {status}\n"
    "**Changes**:\n"
    "```diff\n"
    "{patch}\n"
    "```\n"
    "\n"
    "Provide a detailed review with:\n"
    "1. Summary: a brief summary of what changed\n"
    "2. Issues: one bullet per problem, prefixed with 'Bug:', 'Issue:' or "
    "'Concern:'\n"
    "3. Suggestions: one bullet per improvement, prefixed with 'Suggestion:', "
    "'Recommendation:' or 'Consider:'\n"
    "4. Overall recommendation"
)

NO_DIFF_PLACEHOLDER = "(No diff available)"


def build_user_prompt(filename: str, status: str, patch: str) -> str:
    return USER_PROMPT.format(
        filename=filename,
        status=status,
        patch=patch or NO_DIFF_PLACEHOLDER,
    )
