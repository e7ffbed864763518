"""
Lay out a built family tree in logical coordinates.

Each generation is one row. A node sits centered above the span of its
children; children keep the builder's left-to-right order. The layout never
depends on the viewport: zoom and pan are a single transform applied on top.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from ..models import Member, TreeNode
from . import formatting

log = logging.getLogger(__name__)

CARD_WIDTH = 140
CARD_HEIGHT = 96
SPOUSE_GAP = 32       # room for the couple marker between the two cards
SIBLING_GAP = 48      # horizontal space between sibling subtrees
CONNECTOR = 48        # length of the stem and of each drop
HEADER_HEIGHT = 72
PADDING = 32


@dataclass(frozen=True)
class PersonCard:
    member: Member
    x: float
    y: float
    level: int
    is_root: bool = False
    is_spouse: bool = False
    width: float = CARD_WIDTH
    height: float = CARD_HEIGHT

    @property
    def deceased(self) -> bool:
        return self.member.has_death_date

    @property
    def initial(self) -> str:
        return self.member.fullname[:1].upper()

    @property
    def life_span(self) -> str:
        return formatting.life_span(self.member.birth_date, self.member.death_date)

    @property
    def age(self) -> str:
        return formatting.age_label(self.member.birth_date, self.member.death_date)

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px <= self.x + self.width and self.y <= py <= self.y + self.height


@dataclass(frozen=True)
class CoupleLink:
    """Marker drawn between a member and its spouse."""
    x: float
    y: float


@dataclass(frozen=True)
class Connector:
    x1: float
    y1: float
    x2: float
    y2: float
    kind: str  # stem | bar | drop


@dataclass
class TreeLayout:
    title: str
    width: float = 0.0
    height: float = 0.0
    cards: List[PersonCard] = field(default_factory=list)
    couples: List[CoupleLink] = field(default_factory=list)
    connectors: List[Connector] = field(default_factory=list)

    def hit_test(self, px: float, py: float) -> Optional[PersonCard]:
        for card in self.cards:
            if card.contains(px, py):
                return card
        return None


def _couple_width(node: TreeNode) -> float:
    return CARD_WIDTH * 2 + SPOUSE_GAP if node.spouse else CARD_WIDTH


class _Layouter:
    def __init__(self, root: TreeNode):
        self.root = root
        self.widths: Dict[int, float] = {}
        self.layout = TreeLayout(title=f"{root.member.fullname} Family Tree")

    def width(self, node: TreeNode) -> float:
        key = id(node)
        if key not in self.widths:
            self.widths[key] = max(_couple_width(node), self._children_width(node))
        return self.widths[key]

    def _children_width(self, node: TreeNode) -> float:
        if not node.children:
            return 0.0
        return sum(self.width(c) for c in node.children) + SIBLING_GAP * (len(node.children) - 1)

    def place(self, node: TreeNode, left: float, y: float) -> None:
        cx = left + self.width(node) / 2
        card_left = cx - _couple_width(node) / 2
        is_root = node.level == 0

        self.layout.cards.append(PersonCard(node.member, card_left, y, node.level, is_root=is_root))
        if node.spouse:
            self.layout.couples.append(CoupleLink(card_left + CARD_WIDTH + SPOUSE_GAP / 2, y + CARD_HEIGHT / 2))
            self.layout.cards.append(
                PersonCard(node.spouse, card_left + CARD_WIDTH + SPOUSE_GAP, y, node.level,
                           is_root=is_root, is_spouse=True)
            )

        if not node.children:
            return

        top = y + CARD_HEIGHT
        child_y = top + 2 * CONNECTOR
        if len(node.children) == 1:
            # straight drop, no bar
            self.layout.connectors.append(Connector(cx, top, cx, child_y, "drop"))
            child = node.children[0]
            self.place(child, cx - self.width(child) / 2, child_y)
            return

        bar_y = top + CONNECTOR
        self.layout.connectors.append(Connector(cx, top, cx, bar_y, "stem"))
        x = cx - self._children_width(node) / 2
        centers: List[float] = []
        for child in node.children:
            w = self.width(child)
            ccx = x + w / 2
            centers.append(ccx)
            self.layout.connectors.append(Connector(ccx, bar_y, ccx, child_y, "drop"))
            self.place(child, x, child_y)
            x += w + SIBLING_GAP
        self.layout.connectors.append(Connector(centers[0], bar_y, centers[-1], bar_y, "bar"))

    def run(self) -> TreeLayout:
        top = PADDING + HEADER_HEIGHT
        self.place(self.root, PADDING, top)
        self.layout.width = self.width(self.root) + 2 * PADDING
        bottom = max(c.y + c.height for c in self.layout.cards)
        self.layout.height = bottom + PADDING
        return self.layout


def layout_tree(root: TreeNode) -> TreeLayout:
    """Compute card positions and connector segments for a built tree."""
    return _Layouter(root).run()


@dataclass(frozen=True)
class SelectionEvent:
    """A person was picked on the rendered tree."""
    member: Member

    @property
    def member_id(self) -> str:
        return self.member.id


class TreeRenderer:
    """
    Holds the layout of one tree and reports selections through `on_select`.

    The renderer never fetches anything itself; whoever subscribes decides
    what a selection means.
    """

    def __init__(self, root: TreeNode, on_select: Callable[[SelectionEvent], None] | None = None):
        self.root = root
        self.layout = layout_tree(root)
        self.on_select = on_select
        self._by_id: Dict[str, Member] = {}
        for card in self.layout.cards:
            self._by_id.setdefault(card.member.id, card.member)

    def member(self, member_id: str) -> Optional[Member]:
        return self._by_id.get(str(member_id))

    def select(self, member_id: str) -> Optional[SelectionEvent]:
        member = self.member(member_id)
        if member is None:
            log.debug("Selection of unknown member %s ignored", member_id)
            return None
        event = SelectionEvent(member)
        if self.on_select is not None:
            self.on_select(event)
        return event

    def click(self, point: Tuple[float, float]) -> Optional[SelectionEvent]:
        """Click at a logical point; selects the card under it, if any."""
        card = self.layout.hit_test(point[0], point[1])
        if card is None:
            return None
        return self.select(card.member.id)
