"""Style configuration, page geometry, and per-block style resolution."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from docforge.enums import Alignment, BlockRole, FontWeight
from docforge.services.pdf.metrics import HELVETICA, HELVETICA_BOLD, FontFace


class StyleConfig(BaseModel):
    """User-adjustable typography. Sizes are in points before scaling."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    font_scale: float = Field(default=70, gt=0, le=400)  # percent
    title_font_size: float = Field(default=29, gt=0, le=144)
    heading_font_size: float = Field(default=17, gt=0, le=144)
    body_font_size: float = Field(default=15, gt=0, le=144)
    title_font_weight: FontWeight = FontWeight.NORMAL
    heading_font_weight: FontWeight = FontWeight.NORMAL
    body_font_weight: FontWeight = FontWeight.LIGHT

    @property
    def scale(self) -> float:
        return self.font_scale / 100

    def base_size(self, role: BlockRole) -> float:
        if role == BlockRole.TITLE:
            return self.title_font_size
        if role == BlockRole.HEADING:
            return self.heading_font_size
        return self.body_font_size

    def weight(self, role: BlockRole) -> FontWeight:
        if role == BlockRole.TITLE:
            return self.title_font_weight
        if role == BlockRole.HEADING:
            return self.heading_font_weight
        return self.body_font_weight


# Type1 base fonts have no light face; light text uses the regular face
WEIGHT_FACES: dict[FontWeight, FontFace] = {
    FontWeight.NORMAL: HELVETICA,
    FontWeight.LIGHT: HELVETICA,
    FontWeight.BOLD: HELVETICA_BOLD,
}

LINE_HEIGHT_FACTORS = {
    BlockRole.TITLE: 1.3,
    BlockRole.HEADING: 1.42,
    BlockRole.CENTERED_BODY: 1.35,
    BlockRole.BODY: 1.58,
}


@dataclass(frozen=True)
class LayoutConfig:
    """Page geometry in points. Vertical positions are measured down from the page top."""

    page_width: float = 612
    page_height: float = 792

    rail_width: float = 22
    rail_color: tuple[int, int, int] = (211, 31, 45)

    text_left: float = 64
    text_right_inset: float = 40
    content_top: float = 112
    content_bottom_inset: float = 74
    centered_width_factor: float = 0.9
    min_list_column: float = 24

    logo_x: float = 54
    logo_y: float = 40
    logo_width: float = 135

    label_right_inset: float = 72
    label_top: float = 56
    label_color: tuple[int, int, int] = (65, 69, 78)
    label_line_factor: float = 1.15

    footer_inset: float = 72
    footer_bottom_inset: float = 42
    footer_line_gap: float = 17
    footer_font_size: float = 10

    text_color: tuple[int, int, int] = (0, 0, 0)
    min_font_size: float = 8

    @property
    def text_right(self) -> float:
        return self.page_width - self.text_right_inset

    @property
    def text_width(self) -> float:
        return self.text_right - self.text_left

    @property
    def content_bottom(self) -> float:
        return self.page_height - self.content_bottom_inset

    @property
    def footer_y(self) -> float:
        return self.page_height - self.footer_bottom_inset


@dataclass(frozen=True)
class ResolvedLineStyle:
    font_size: float
    line_height: float
    align: Alignment
    face: FontFace
    weight: FontWeight
    spacing_before: float
    spacing_after: float
    max_width: float


def scaled_size(size: float, style: StyleConfig, layout: LayoutConfig) -> float:
    return max(layout.min_font_size, round(size * style.scale, 2))


def resolve_style(
    role: BlockRole,
    style: StyleConfig,
    layout: LayoutConfig,
    previous_role: BlockRole | None = None,
    next_role: BlockRole | None = None,
) -> ResolvedLineStyle:
    """
    Resolve the rendered style of a block from its role and neighbours.

    A centered notice directly under the title is set slightly larger, and
    the title pulls the following notice up towards it.

    Args:
        role: Role of the block being styled
        style: User style configuration
        layout: Page geometry
        previous_role: Role of the preceding block, if any
        next_role: Role of the following block, if any

    Returns:
        ResolvedLineStyle for every line of the block
    """
    boost = 2 if role == BlockRole.CENTERED_BODY and previous_role == BlockRole.TITLE else 0
    font_size = scaled_size(style.base_size(role) + boost, style, layout)

    heading_spacing = max(8, round(font_size * 0.55, 2))
    spacing_before = heading_spacing if role == BlockRole.HEADING else 0
    if role == BlockRole.HEADING:
        spacing_after = heading_spacing
    elif role == BlockRole.TITLE:
        spacing_after = -6 if next_role == BlockRole.CENTERED_BODY else 14
    elif role == BlockRole.CENTERED_BODY:
        spacing_after = 8
    else:
        spacing_after = 10

    centered = role in (BlockRole.TITLE, BlockRole.CENTERED_BODY)
    weight = style.weight(role)

    return ResolvedLineStyle(
        font_size=font_size,
        line_height=font_size * LINE_HEIGHT_FACTORS[role],
        align=Alignment.CENTER if centered else Alignment.LEFT,
        face=WEIGHT_FACES[weight],
        weight=weight,
        spacing_before=spacing_before,
        spacing_after=spacing_after,
        max_width=(
            layout.text_width * layout.centered_width_factor if centered else layout.text_width
        ),
    )
