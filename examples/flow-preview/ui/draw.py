"""Drawing helpers for one evaluated frame."""
from __future__ import annotations

import pygame

from flowframe import ContainerState, FrameState, ObjectState

from ui.constants import (
    BILL_COLOR,
    OBJECT_RADIUS,
    ORIGIN_X,
    ORIGIN_Y,
    PHASE_COLORS,
    SAFE_COLOR,
    SAFE_SIZE,
    SCREEN_H,
    SCREEN_W,
    STATUS_BG,
    STATUS_H,
    TEXT_COLOR,
    TEXT_DIM,
    TOKEN_COLOR,
    WALLET_COLOR,
    WALLET_SIZE,
)


def _to_screen(x: float, y: float) -> tuple[int, int]:
    return int(ORIGIN_X + x), int(ORIGIN_Y + y)


def _alpha(color: tuple[int, int, int], opacity: float) -> tuple[int, int, int, int]:
    return (*color, int(255 * max(0.0, min(opacity, 1.0))))


def draw_container(
    surface: pygame.Surface,
    font: pygame.font.Font,
    state: ContainerState,
    size: tuple[int, int],
    color: tuple[int, int, int],
    value_unit: str,
) -> None:
    if not state.visible or state.scale <= 0:
        return
    w = max(1, int(size[0] * state.scale))
    h = max(1, int(size[1] * state.scale))
    box = pygame.Surface((w, h), pygame.SRCALPHA)
    box.fill(_alpha(color, state.opacity))
    if state.rotation:
        box = pygame.transform.rotate(box, -state.rotation)
    cx, cy = _to_screen(state.x, state.y)
    surface.blit(box, box.get_rect(center=(cx, cy)))

    if state.balance is not None:
        text = f"${state.balance}" if value_unit == "currency" else str(state.balance)
        label = font.render(text, True, TEXT_COLOR)
        label.set_alpha(int(255 * state.label_opacity * state.opacity))
        surface.blit(label, label.get_rect(center=(cx, cy - h // 2 - 14)))


def draw_object(
    surface: pygame.Surface, obj: ObjectState, color: tuple[int, int, int]
) -> None:
    radius = max(1, int(OBJECT_RADIUS * obj.scale))
    dot = pygame.Surface((radius * 2, radius * 2), pygame.SRCALPHA)
    pygame.draw.circle(dot, _alpha(color, obj.opacity), (radius, radius), radius)
    surface.blit(dot, dot.get_rect(center=_to_screen(obj.x, obj.y)))


def draw_frame(
    surface: pygame.Surface, font: pygame.font.Font, state: FrameState
) -> None:
    """Safe, then wallet, then moving objects on top."""
    if state.safe is not None:
        draw_container(surface, font, state.safe, SAFE_SIZE, SAFE_COLOR, state.value_unit)
    draw_container(surface, font, state.wallet, WALLET_SIZE, WALLET_COLOR, state.value_unit)
    color = BILL_COLOR if state.value_unit == "currency" else TOKEN_COLOR
    for obj in state.visible_objects:
        draw_object(surface, obj, color)


def draw_status_bar(
    surface: pygame.Surface,
    font: pygame.font.Font,
    preset: str,
    state: FrameState,
    paused: bool,
) -> None:
    y = SCREEN_H - STATUS_H
    pygame.draw.rect(surface, STATUS_BG, (0, y, SCREEN_W, STATUS_H))

    phase_color = PHASE_COLORS.get(state.phase, TEXT_COLOR)
    left = f"{preset}  frame {int(state.frame)}"
    surface.blit(font.render(left, True, TEXT_COLOR), (10, y + 10))
    surface.blit(font.render(state.phase, True, phase_color), (260, y + 10))

    hints = "Space pause  <-/-> seek  Tab preset  Esc quit"
    if paused:
        hints = "PAUSED  " + hints
    text = font.render(hints, True, TEXT_DIM)
    surface.blit(text, (SCREEN_W - text.get_width() - 10, y + 10))
