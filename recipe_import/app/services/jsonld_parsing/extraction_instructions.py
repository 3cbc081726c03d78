from typing import Optional

SINGLE_SCRIPT_SNIPPET = (
    "copy(JSON.parse(document.querySelector('script[type=\"application/ld+json\"]').textContent))"
)
ALL_SCRIPTS_SNIPPET = (
    "copy([...document.querySelectorAll('script[type=\"application/ld+json\"]')]"
    ".map(s => JSON.parse(s.textContent)))"
)


def get_extraction_instructions(source_url: Optional[str] = None) -> str:
    """Copy-pasteable steps for pulling embedded JSON-LD out of a live page."""
    target = source_url.strip() if source_url and source_url.strip() else "the recipe page"
    return "\n".join(
        [
            "How to copy recipe JSON-LD from a website:",
            "",
            f"1. Open {target} in your browser.",
            "2. Open the developer tools (F12, or Cmd+Option+I on macOS) and switch to the Console tab.",
            "3. Paste this command and press Enter to copy the recipe data to your clipboard:",
            "",
            f"   {SINGLE_SCRIPT_SNIPPET}",
            "",
            "4. If the page has several JSON-LD blocks, copy all of them instead:",
            "",
            f"   {ALL_SCRIPTS_SNIPPET}",
            "",
            "5. Paste the copied text into the import box.",
            "",
            "Notes:",
            "- Raw JSON, markdown code blocks and escaped console output are all accepted.",
            "- The data must contain an object with @type \"Recipe\", directly, in an array, or inside @graph.",
        ]
    )
