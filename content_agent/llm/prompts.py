"""
Prompt catalogue: system instructions per content type, image style
suffixes and the static template gallery.
"""
from typing import Dict, List, Optional

SYSTEM_PROMPTS: Dict[str, str] = {
    "article": (
        "You are a professional content writer. Create well-structured, engaging articles "
        "with proper headings and paragraphs."
    ),
    "social_post": (
        "You are a social media expert. Create engaging, concise posts optimized for "
        "social media platforms."
    ),
    "video_script": (
        "You are a professional scriptwriter. Create engaging video scripts with clear "
        "dialogue and scene descriptions."
    ),
    "email": (
        "You are an email marketing specialist. Create compelling email content that "
        "drives engagement."
    ),
    "seo_content": (
        "You are an SEO expert. Create content that is optimized for search engines while "
        "maintaining readability."
    ),
}

DEFAULT_SYSTEM_PROMPT = "You are a helpful AI assistant that creates high-quality content."

SEO_ANALYSIS_SYSTEM_PROMPT = (
    "You are an SEO expert. Analyze content and provide actionable SEO recommendations "
    "in JSON format."
)

STYLE_SUFFIXES: Dict[str, str] = {
    "natural": "natural lighting, realistic colors",
    "photographic": "photorealistic, high quality photography",
    "digital_art": "digital art, highly detailed",
    "illustration": "illustration, clean lines, vibrant colors",
    "abstract": "abstract art, creative interpretation",
}

CONTENT_TEMPLATES: List[Dict[str, str]] = [
    {
        "id": "blog-post",
        "title": "Blog Post",
        "description": "Create engaging blog posts with proper structure",
        "type": "article",
        "prompt_template": (
            "Write a comprehensive blog post about {topic}. Include an engaging introduction, "
            "well-structured main points, and a compelling conclusion."
        ),
    },
    {
        "id": "social-media",
        "title": "Social Media Post",
        "description": "Create viral social media content",
        "type": "social_post",
        "prompt_template": (
            "Create an engaging social media post about {topic}. Make it catchy, include "
            "relevant hashtags, and encourage engagement."
        ),
    },
    {
        "id": "product-description",
        "title": "Product Description",
        "description": "Write compelling product descriptions",
        "type": "article",
        "prompt_template": (
            "Write a compelling product description for {product}. Highlight key features, "
            "benefits, and why customers should buy it."
        ),
    },
    {
        "id": "email-newsletter",
        "title": "Email Newsletter",
        "description": "Create engaging email newsletters",
        "type": "email",
        "prompt_template": (
            "Create an email newsletter about {topic}. Include a catchy subject line, engaging "
            "content, and a clear call-to-action."
        ),
    },
    {
        "id": "video-explainer",
        "title": "Explainer Video Script",
        "description": "Script a short explainer video",
        "type": "video_script",
        "prompt_template": (
            "Write a 60 second explainer video script about {topic} with a hook, three key "
            "points, and a closing call-to-action."
        ),
    },
]


def get_system_prompt(content_type: Optional[str]) -> str:
    """System instruction for a content type, falling back to a generic one."""
    return SYSTEM_PROMPTS.get(content_type or "", DEFAULT_SYSTEM_PROMPT)


def content_type_for_system_prompt(system_prompt: str) -> Optional[str]:
    for content_type, prompt in SYSTEM_PROMPTS.items():
        if prompt == system_prompt:
            return content_type
    return None


def enhance_image_prompt(prompt: str, style: str) -> str:
    """Append the style suffix; raises KeyError for unknown styles."""
    return f"{prompt}, {STYLE_SUFFIXES[style]}"


def build_seo_prompt(content: str, target_keywords: List[str]) -> str:
    return f"""Analyze the following content for SEO optimization.
Target keywords: {', '.join(target_keywords) or 'none provided'}

Content:
{content[:6000]}

Respond with ONLY a JSON object with these keys:
- seo_score: integer 1-100
- suggestions: list of strings
- missing_elements: list of strings
"""
