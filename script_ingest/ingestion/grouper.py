"""Dialogue block grouper for tokenized screenplay text."""

import logging
from typing import Iterable, List, Optional

from ..models import (
    CUE_KINDS,
    DialogueBlock,
    DialogueLine,
    ScriptLineInput,
    Token,
    TokenKind,
)

logger = logging.getLogger(__name__)


def group_dialogue_blocks(tokens: Iterable[Token]) -> List[DialogueBlock]:
    """
    Fold a token stream into dialogue blocks.

    Algorithm:
    1. CHARACTER or SPEAKER_COLON opens a block (SPEAKER_COLON carries its
       own text as the first dialogue line)
    2. DIALOGUE tokens are appended; adjacent ones are joined with a space
       into one logical line per speaking turn
    3. PARENTHETICAL tokens are recorded apart from the speakable text and
       break the join, as does a BLANK
    4. Any other token closes the block
    5. Blocks without dialogue are dropped

    TIMECODE tokens are remembered and attached to the next block; a scene
    heading clears the remembered timecode.

    Args:
        tokens: Tokens in source order

    Returns:
        List of DialogueBlock objects in cue order
    """
    blocks: List[DialogueBlock] = []
    current: Optional[DialogueBlock] = None
    joinable = False  # Last token appended speech with nothing in between
    pending_timecode: Optional[str] = None
    dropped = 0

    def close():
        nonlocal current, dropped
        if current is not None:
            if current.dialogue_lines:
                blocks.append(current)
            else:
                dropped += 1
        current = None

    for token in tokens:
        if token.kind in CUE_KINDS:
            close()
            current = DialogueBlock(
                character_name=token.character_name or token.text,
                character_line=token.line,
                timecode=pending_timecode,
            )
            pending_timecode = None
            joinable = False
            if token.kind == TokenKind.SPEAKER_COLON and token.text:
                current.dialogue_lines.append(DialogueLine(token.text, token.line))
                joinable = True

        elif token.kind == TokenKind.DIALOGUE and current is not None:
            if joinable and current.dialogue_lines:
                last = current.dialogue_lines[-1]
                current.dialogue_lines[-1] = DialogueLine(f"{last.text} {token.text}", last.line)
            else:
                current.dialogue_lines.append(DialogueLine(token.text, token.line))
            joinable = True

        elif token.kind == TokenKind.PARENTHETICAL and current is not None:
            current.parentheticals.append(DialogueLine(token.text, token.line))
            joinable = False

        elif token.kind == TokenKind.BLANK:
            joinable = False

        else:
            close()
            joinable = False
            if token.kind == TokenKind.TIMECODE:
                pending_timecode = token.text
            elif token.kind == TokenKind.SCENE_HEADING:
                pending_timecode = None

    close()

    if dropped:
        logger.debug(f"Dropped {dropped} cues without dialogue")
    logger.debug(f"Grouped {len(blocks)} dialogue blocks")
    return blocks


def blocks_to_script_lines(blocks: Iterable[DialogueBlock]) -> List[ScriptLineInput]:
    """
    Convert dialogue blocks to script-line records.

    Each logical dialogue line becomes one record. The block's timecode and
    parentheticals go on its first record.

    Args:
        blocks: Dialogue blocks in cue order

    Returns:
        List of ScriptLineInput with dense line numbers
    """
    lines: List[ScriptLineInput] = []
    line_number = 1

    for block in blocks:
        notes = "; ".join(p.text for p in block.parentheticals) or None

        for index, dialogue in enumerate(block.dialogue_lines):
            first = index == 0
            lines.append(
                ScriptLineInput(
                    line_number=line_number,
                    role_name=block.character_name,
                    timecode=block.timecode if first else None,
                    source_text=dialogue.text,
                    notes=notes if first else None,
                )
            )
            line_number += 1

    return lines
