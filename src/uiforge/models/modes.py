"""Output modes and their static generation guidance."""

import re
from dataclasses import dataclass, field
from enum import Enum


class OutputMode(str, Enum):
    """What kind of markup a round asks for."""

    HTML = "html"
    WIREFRAME = "wireframe"
    BACKGROUND = "background"
    REFACTOR = "refactor"
    CLONE = "clone"


@dataclass(frozen=True)
class Preset:
    """Canned prompt offered for a mode."""

    label: str
    prompt: str


@dataclass(frozen=True)
class ModeDefinition:
    """Display metadata and system instruction for one output mode."""

    mode: OutputMode
    name: str
    emoji: str
    syntax: str
    system_instruction: str
    title_template: str
    presets: tuple[Preset, ...] = field(default_factory=tuple)

    def title(self, index: int | str) -> str:
        return self.title_template.format(n=index)


_SOFT_BREAK = re.compile(r"([^\n{])\n([^\n}\s+])")
_EXTRA_BLANK_LINES = re.compile(r"\n{3,}")


def flow(text: str) -> str:
    """
    Reflow an instruction written one sentence or bullet per line.

    Single line breaks become spaces; paragraph breaks and lines opening with
    whitespace are kept. Runs of blank lines collapse to one.
    """
    return _EXTRA_BLANK_LINES.sub("\n\n", _SOFT_BREAK.sub(r"\1 \2", text)).strip()


HTML_INSTRUCTION = flow("""
You are a world-class UI/UX designer and frontend developer with an aesthetic sense comparable to designers at Stripe, Vercel, and Figma. Your task is to generate a single, self-contained HTML file that implements a UI based on the user's prompt.

**Core Principles:**
- **Aesthetic Excellence:** Create visually stunning designs. Use sophisticated color palettes (avoiding harsh, default colors), modern typography, and ample whitespace.
- **Modern & Responsive:** The UI must be fully responsive and look flawless on all screen sizes. Utilize modern CSS like Flexbox and Grid.
- **Micro-interactions:** Enhance the user experience with subtle, purposeful animations and transitions (e.g., hover effects, loading states). The UI should feel alive and responsive to user input.
- **Accessibility:** Write clean, semantic, and accessible HTML (e.g., use proper tags, ARIA attributes where necessary).

**Technical Constraints:**
- **Self-Contained:** ALL CSS and JavaScript must be inlined within the single HTML file.
- **No External Dependencies:** Do not use external libraries, frameworks, or assets (no images, fonts from URLs, etc.). Use placeholder content where needed.

Your final output must be ONLY the raw HTML code. Do not include any surrounding text, explanations, or markdown code fences like ```html.
""")

WIREFRAME_INSTRUCTION = flow("""
You are a UI/UX designer specializing in creating low-fidelity wireframes. Your task is to generate a wireframe based on the user's prompt.

**Core Principles:**
- **Low-Fidelity:** Focus on structure, layout, and placement of elements. Do not add color, styling, or detailed graphics.
- **Clarity and Simplicity:** Use basic shapes like rectangles, circles, and lines.
- **Placeholders:** Represent images with a rectangle containing two crossed lines. Represent text with simple labels (e.g., "Username") or placeholder text like "Lorem ipsum...". Use dashed lines for placeholder containers.

**Technical Constraints:**
- **SVG Output:** The output MUST be a single, self-contained SVG file. Set a standard desktop viewport like `viewBox="0 0 1024 768"`.
- **Monochrome:** Use only black for lines/text (#000), white for backgrounds (#FFF), and light gray (#E0E0E0) for fills.
- **Basic Elements:** Use only basic SVG elements: `<svg>`, `<g>`, `<rect>`, `<circle>`, `<line>`, `<path>`, `<text>`.

**Crucially, your entire response must be ONLY the raw SVG code. Do not include any surrounding text, explanations, or markdown code fences like ```svg.
""")

BACKGROUND_INSTRUCTION = flow("""
You are a digital artist and CSS expert specializing in creating beautiful, dynamic, animated backgrounds. When given a prompt, you must generate a single, self-contained HTML file with a `<body>` tag that has the described gradient or pattern as its background.

**Core Principles:**
- **Artistic & Dynamic:** Do not create static backgrounds. Use CSS animations (`@keyframes`) to make the background subtly shift, pulse, or evolve over time. The goal is to create "living art".
- **Sophisticated Gradients:** Use multiple, layered gradients (`linear-gradient`, `radial-gradient`, `conic-gradient`) to create depth and complexity.
- **Performance:** Ensure animations are smooth and performant (e.g., by animating `transform` or `opacity`).

**Technical Constraints:**
- **Self-Contained:** All CSS must be inlined within a `<style>` tag. The HTML should be minimal.
- **No External Dependencies:** No external libraries, frameworks, or assets.

Your final output should be ONLY the raw HTML code. Do not include any surrounding text, explanations, or markdown code fences like ```html.
""")

REFACTOR_INSTRUCTION = flow("""
You are a world-class senior frontend engineer and UI/UX designer with a keen eye for aesthetics, with a design sense on par with Vercel or Stripe. You will be given a snippet of frontend code (HTML, CSS, JavaScript). Your task is to perform a **dramatic transformation**, refactoring it into a stunning, modern, and responsive UI.

**Your goals are:**
1.  **Aesthetic Revolution:** This is not a cleanup; it's a complete redesign. Transform the provided code into something visually exceptional. Introduce a sophisticated color scheme, elegant typography, and fluid, purposeful animations.
2.  **Modern Best Practices:** The final code must be clean, semantic, accessible, and responsive across all devices.
3.  **Preserve Functionality:** The core purpose of the original code should be preserved and enhanced, not lost.

**Technical Constraints:**
- **Self-Contained:** The final output must be a single, self-contained HTML file. All CSS and JavaScript must be inlined.
- **No External Dependencies:** Do not use external libraries, frameworks, or assets.

Your final output should be ONLY the raw HTML code. Do not include any surrounding text, explanations, or markdown code fences like ```html.
""")

CLONE_INSTRUCTION = flow("""
You are a world-class senior frontend engineer and UI/UX designer with a design sense comparable to Vercel or Stripe. Your task is to generate a single, self-contained HTML file based on the user's input.
The input will be either:
1.  The HTML from an existing webpage and a prompt with instructions for modification.
2.  An image of a Figma design and a prompt with instructions for implementation.

**Core Principles:**
- **Follow Instructions:** Adhere strictly to the user's instructions (e.g., "make it dark mode", "simplify the layout", "implement this design").
- **Aesthetic Excellence:** Transform the design into something visually stunning. Use sophisticated color palettes, modern typography, and ample whitespace.
- **Content Preservation (for HTML):** If given HTML, preserve the original text and high-level structure, but completely overhaul the styling and layout.
- **Pixel-Perfect Implementation (for Images):** If given an image, create a responsive HTML/CSS implementation that is a faithful representation of the design.
- **Modern & Responsive:** Ensure the resulting UI is fully responsive and uses modern best practices.

**Technical Constraints:**
- **Self-Contained:** The final output must be a single HTML file. All CSS and JavaScript must be inlined.
- **No External Dependencies:** Do not link to external assets. If you need placeholder images, generate them using SVG.

Your final output must be ONLY the raw HTML code. Do not include any surrounding text, explanations, or markdown code fences like ```html.
""")


MODES: dict[OutputMode, ModeDefinition] = {
    OutputMode.HTML: ModeDefinition(
        mode=OutputMode.HTML,
        name="HTML/JS",
        emoji="📄",
        syntax="html",
        system_instruction=HTML_INSTRUCTION,
        title_template="Code {n}",
        presets=(
            Preset("☀️ weather app", "a simulated weather app with a clean, modern UI"),
            Preset("📝 todo list", "a todo list app with add, delete, and complete functionality"),
            Preset(
                "🚀 SaaS landing page",
                "a modern SaaS landing page with a hero section, feature list, and pricing table",
            ),
            Preset("🪙 coin flip", "coin flipping app, with an animated coin"),
            Preset("🗓️ calendar component", "a monthly calendar component"),
            Preset("🧮 calculator", "a stylish, functional calculator"),
            Preset("📊 analytics dashboard", "a dashboard UI for a data analytics platform"),
            Preset("🎮 tic-tac-toe", "tic tac toe game where you play against the computer"),
            Preset(
                "🎨 pricing page",
                "a responsive pricing page with 3 tiers and a toggle for monthly/annual pricing",
            ),
            Preset("🖼️ product card", "an animated product card with a hover effect"),
            Preset("👤 user profile", "a user profile page for a social media app"),
            Preset("📎 login form", "a login form with input validation and a sleek design"),
            Preset("🖥️ responsive navbar", "a responsive navigation bar with a hamburger menu for mobile"),
            Preset("⚙️ settings page", "a settings page with various form controls and toggles"),
            Preset("🧠 memory game", "a memory game with a card flipping animation"),
            Preset(
                "🛍️ product page",
                "an e-commerce product detail page with image gallery and reviews",
            ),
        ),
    ),
    OutputMode.WIREFRAME: ModeDefinition(
        mode=OutputMode.WIREFRAME,
        name="UI Wireframe",
        emoji="✏️",
        syntax="xml",
        system_instruction=WIREFRAME_INSTRUCTION,
        title_template="Wireframe {n}",
        presets=(
            Preset(
                "e-commerce product page",
                "a wireframe for an e-commerce product page with a main image, thumbnails, "
                "product description, and add to cart button",
            ),
            Preset(
                "mobile app dashboard",
                "a wireframe for a mobile fitness app dashboard showing daily stats, weekly "
                "progress chart, and recent activities",
            ),
            Preset(
                "SaaS pricing page",
                "a wireframe for a SaaS pricing page with three distinct tiers, feature "
                "comparison, and a call-to-action for each",
            ),
            Preset(
                "social media feed",
                "a wireframe for the main feed of a social media app, showing multiple posts "
                "with user avatars, images, and action buttons",
            ),
            Preset(
                "login and registration screen",
                "a wireframe for a login and registration screen with input fields, social "
                "login options, and a submit button",
            ),
            Preset(
                "analytics dashboard",
                "a wireframe for a web analytics dashboard with a sidebar, main chart area, "
                "and several stat cards",
            ),
            Preset(
                "music player interface",
                "a wireframe for a music player UI with album art, track info, playback "
                "controls, and a playlist view",
            ),
            Preset(
                "project management board",
                'a wireframe for a Kanban-style project management board with columns for '
                '"To Do", "In Progress", and "Done"',
            ),
        ),
    ),
    OutputMode.BACKGROUND: ModeDefinition(
        mode=OutputMode.BACKGROUND,
        name="Background",
        emoji="🎨",
        syntax="html",
        system_instruction=BACKGROUND_INSTRUCTION,
        title_template="Background {n}",
        presets=(
            Preset("ocean sunrise", "a vibrant, animated gradient of an ocean sunrise"),
            Preset(
                "synthwave sunset",
                "a synthwave-style animated sunset gradient with neon pinks and purples",
            ),
            Preset(
                "forest canopy",
                "an animated gradient that looks like sunlight filtering through a forest canopy",
            ),
            Preset(
                "cotton candy sky",
                "a soft, pastel-colored, slowly shifting cotton candy sky gradient",
            ),
            Preset(
                "deep space nebula",
                "a dark, cosmic animated gradient resembling a deep space nebula",
            ),
            Preset(
                "molten lava",
                "a fiery, animated gradient of molten lava with reds, oranges, and yellows",
            ),
            Preset(
                "arctic aurora",
                "an ethereal animated gradient that mimics the arctic aurora borealis",
            ),
            Preset(
                "vintage paper",
                "a subtle animated gradient that looks like old, vintage paper with a soft "
                "light flicker",
            ),
        ),
    ),
    OutputMode.REFACTOR: ModeDefinition(
        mode=OutputMode.REFACTOR,
        name="Code Refactor",
        emoji="💅",
        syntax="html",
        system_instruction=REFACTOR_INSTRUCTION,
        title_template="Refactored Code {n}",
        presets=(
            Preset(
                "unstyled form",
                '<form>\n  <label for="name">Name:</label><br>\n'
                '  <input type="text" id="name" name="name"><br>\n'
                '  <label for="email">Email:</label><br>\n'
                '  <input type="email" id="email" name="email"><br>\n'
                '  <input type="submit" value="Submit">\n</form>',
            ),
            Preset("basic list", "<ul>\n  <li>Item 1</li>\n  <li>Item 2</li>\n  <li>Item 3</li>\n</ul>"),
            Preset(
                "simple card",
                "<div>\n  <h2>Card Title</h2>\n"
                "  <p>This is some text content for the card.</p>\n"
                "  <button>Learn More</button>\n</div>",
            ),
            Preset("plain button", "<button>Click Me</button>"),
            Preset(
                "basic table",
                '<table border="1">\n'
                "  <tr>\n    <th>Firstname</th>\n    <th>Lastname</th>\n  </tr>\n"
                "  <tr>\n    <td>Peter</td>\n    <td>Griffin</td>\n  </tr>\n"
                "  <tr>\n    <td>Lois</td>\n    <td>Griffin</td>\n  </tr>\n"
                "</table>",
            ),
        ),
    ),
    OutputMode.CLONE: ModeDefinition(
        mode=OutputMode.CLONE,
        name="Clone & Refactor",
        emoji="🔗",
        syntax="html",
        system_instruction=CLONE_INSTRUCTION,
        title_template="Cloned {n}",
        presets=(
            Preset(
                "make it dark mode",
                "Refactor this site to use a modern, professional dark mode theme.",
            ),
            Preset(
                "simplify the layout",
                "Simplify the layout into a clean, single-column, minimalist design with "
                "generous whitespace.",
            ),
            Preset(
                "give it a retro 90s theme",
                "Give this page a retro 90s GeoCities-style makeover, complete with pixelated "
                "fonts, bright colors, and maybe a cheesy animation.",
            ),
            Preset(
                "make it look like a brutalist website",
                "Convert the design to a brutalist style. Use raw, unstyled elements, "
                "monochrome colors, and a monospace font.",
            ),
            Preset(
                "turn it into a professional blog post",
                "Reformat the content into a clean, readable, professional blog post layout, "
                "like something you would see on Medium.",
            ),
            Preset(
                "modernize with a glassmorphism effect",
                "Modernize the UI by applying a glassmorphism (frosted glass) effect to the "
                "main content containers.",
            ),
        ),
    ),
}


def get_mode(mode: OutputMode | str) -> ModeDefinition:
    """Look up a mode definition."""
    return MODES[OutputMode(mode)]
