"""Prompt construction for handwritten newspaper generation."""

from __future__ import annotations

from enum import Enum


class ImageStyle(str, Enum):
    """Visual style of the generated newspaper."""

    HANDWRITTEN = "handwritten"
    WIREFRAME = "wireframe"
    BLACKBOARD = "blackboard"
    ANIME = "anime"
    CUSTOM = "custom"


DEFAULT_STYLE = ImageStyle.HANDWRITTEN

STYLE_DESCRIPTIONS: dict[ImageStyle, str] = {
    ImageStyle.HANDWRITTEN: "手绘手抄报风格，彩色铅笔与水彩笔质感，纸张纹理自然",
    ImageStyle.WIREFRAME: "线框简笔画风格，黑色线条勾勒轮廓，留白清爽，便于涂色",
    ImageStyle.BLACKBOARD: "黑板报风格，深绿色黑板底色，彩色粉笔字和粉笔插画",
    ImageStyle.ANIME: "日系动漫插画风格，明亮清新的配色，可爱的卡通角色",
}

SIGNATURE_SUFFIX = "@Gemini 3"


class PromptBuilder:
    """Builds the instruction text sent alongside the optional reference image."""

    def build(
        self,
        user_text: str,
        style: ImageStyle | str = DEFAULT_STYLE,
        *,
        signature: str | None = None,
        has_base_image: bool = False,
    ) -> str:
        """Return the final prompt; ``custom`` style passes the text through untouched."""

        if style == ImageStyle.CUSTOM:
            return user_text

        style_text = self.style_description(style)
        if has_base_image:
            body = (
                "请根据提供的图片进行修改，生成一张适合幼儿园小朋友的手抄报。"
                f"主题是：{user_text}\n\n"
                "要求：\n"
                f"- 画面风格：{style_text}\n"
                "- 保留原图的整体构图和主要元素，只按要求进行修改\n"
                "- 画面色彩鲜艳、活泼可爱，适合儿童\n"
                "- 添加可爱的卡通元素和装饰边框\n"
                "- 整体布局美观、有创意"
            )
        else:
            body = (
                "请为幼儿园小朋友生成一张精美的手抄报图片。"
                f"主题是：{user_text}\n\n"
                "要求：\n"
                f"- 画面风格：{style_text}\n"
                "- 画面色彩鲜艳、活泼可爱，适合儿童\n"
                "- 包含可爱的卡通元素和装饰边框\n"
                "- 内容适合幼儿园年龄段的孩子\n"
                "- 留出一些空白的文字区域供孩子填写\n"
                "- 整体布局美观、有创意"
            )

        signature_text = (signature or "").strip()
        if signature_text:
            body += (
                "\n- 在画面右下角用艺术字体写上签名："
                f"「{signature_text} {SIGNATURE_SUFFIX}」"
            )
        return body

    @staticmethod
    def style_description(style: ImageStyle | str) -> str:
        """Return the phrase for ``style``, falling back to the handwritten look."""

        try:
            key = ImageStyle(style)
        except ValueError:
            key = DEFAULT_STYLE
        return STYLE_DESCRIPTIONS.get(key, STYLE_DESCRIPTIONS[DEFAULT_STYLE])
