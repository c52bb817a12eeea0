# visualization.py
"""
Handles the visualization of the particle simulation using Pygame.

The Visualizer is the host-side collaborator of ParticleEngine: it reports
the window size as simulation bounds, turns clicks and key presses into
engine calls, and draws the particles, their trails and the control panel.
"""
import logging
import pygame
from typing import Any, Dict, Optional, Tuple

import controls
from constants import (
    BACKGROUND_COLOR, DEFAULT_INSERT_COUNT, DEFAULT_WINDOW_SIZE, FULLSCREEN,
    HINT_TEXT, PARTICLE_GLOW_ALPHA, PARTICLE_GLOW_RATIO, TRAIL_ALPHA,
    TRAIL_WIDTH_RATIO, UI_BACKGROUND_ALPHA, UI_PANEL_WIDTH
)
from color import to_hex
from engine import ParticleEngine

# --- Data Contracts ---
#
# class Visualizer:
#   - __init__(self, vis_params: Optional[Dict[str, Any]] = None):
#     - Inputs: The "visualization" section of config.json
#       ("fullscreen", "window_width", "window_height").
#     - Side Effects: Initializes Pygame and opens a resizable window.
#
#   - sim_size -> Tuple[int, int]: the current drawable area, used as bounds.
#
#   - handle_events(self, engine: ParticleEngine) -> bool:
#     - Outputs: False if the user asked to quit, True otherwise.
#     - Side Effects: Pushes bounds on resize, inserts particles on click,
#       replaces engine settings on key presses, resets on request.
#
#   - draw(self, engine: ParticleEngine) -> None:
#     - Side Effects: Renders the current population and the UI. Reads the
#       engine state only; never mutates it.

KEY_HELP = [
    ("Up / Down", "Select setting"),
    ("Left / Right", "Adjust setting"),
    ("T", "Toggle trails"),
    ("C", "Cycle color mode"),
    ("B", "Cycle base color"),
    ("R", "Reset"),
    ("Tab", "Hide / show panel"),
]


class Visualizer:
    """
    Renders the particle system state and provides interactive UI elements.
    """
    def __init__(self, vis_params: Optional[Dict[str, Any]] = None):
        vis_params = vis_params if vis_params is not None else {}
        pygame.init()
        pygame.font.init()

        if vis_params.get('fullscreen', FULLSCREEN):
            display_info = pygame.display.Info()
            width, height = display_info.current_w, display_info.current_h
            self.screen = pygame.display.set_mode((width, height), pygame.FULLSCREEN)
        else:
            width = vis_params.get('window_width', DEFAULT_WINDOW_SIZE[0])
            height = vis_params.get('window_height', DEFAULT_WINDOW_SIZE[1])
            self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)

        pygame.display.set_caption("Particle Simulator")
        self.clock = pygame.time.Clock()
        self._create_layers()

        try:
            self.font_title = pygame.font.SysFont("Segoe UI", 16, bold=True)
            self.font_main = pygame.font.SysFont("Segoe UI", 14)
            self.font_main_bold = pygame.font.SysFont("Segoe UI", 14, bold=True)
        except pygame.error:
            logging.warning("Segoe UI font not found, falling back to default sans-serif.")
            self.font_title = pygame.font.SysFont(None, 20, bold=True)
            self.font_main = pygame.font.SysFont(None, 18)
            self.font_main_bold = pygame.font.SysFont(None, 18, bold=True)

        self.panel_visible = True
        self.selected_index = 0
        self.reset_button_rect = pygame.Rect(0, 0, 0, 0)

        # --- UI Color Palette ---
        self.button_color = (80, 80, 80)
        self.button_hover_color = (110, 110, 110)
        self.text_color_title = (255, 255, 255)
        self.text_color_key = (200, 200, 200)
        self.text_color_value = (255, 255, 255)
        self.text_color_hint = (156, 163, 175)
        self.param_box_color = (60, 60, 60, 160)
        self.param_box_selected_color = (52, 152, 219, 180)
        self.param_box_spacing = 4

        logging.info(f"Visualizer initialized with Pygame display ({width}x{height}).")

    @property
    def sim_size(self) -> Tuple[int, int]:
        return self.screen.get_size()

    def _create_layers(self):
        """(Re)creates the alpha layers used for trails and glow."""
        size = self.sim_size
        self.trail_surface = pygame.Surface(size, pygame.SRCALPHA)
        self.particle_surface = pygame.Surface(size, pygame.SRCALPHA)
        self.ui_panel_surface = pygame.Surface((UI_PANEL_WIDTH, size[1]), pygame.SRCALPHA)
        self.ui_panel_surface.fill((40, 40, 40, UI_BACKGROUND_ALPHA))

    @property
    def _panel_rect(self) -> pygame.Rect:
        width, height = self.sim_size
        return pygame.Rect(width - UI_PANEL_WIDTH, 0, UI_PANEL_WIDTH, height)

    # --- Events ---

    def handle_events(self, engine: ParticleEngine) -> bool:
        """
        Processes pending Pygame events.

        Returns:
            bool: False if the simulation should exit, True otherwise.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False

            if event.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self._create_layers()
                engine.set_bounds(*self.sim_size)

            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    logging.info("ESC key pressed. Shutting down visualizer.")
                    return False
                self._handle_key(event.key, engine)

            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._handle_click(event.pos, engine)

        return True

    def _handle_key(self, key: int, engine: ParticleEngine):
        names = controls.ADJUSTABLE_SETTINGS
        settings = engine.settings

        if key == pygame.K_TAB:
            self.panel_visible = not self.panel_visible
        elif key == pygame.K_UP:
            self.selected_index = (self.selected_index - 1) % len(names)
        elif key == pygame.K_DOWN:
            self.selected_index = (self.selected_index + 1) % len(names)
        elif key in (pygame.K_LEFT, pygame.K_RIGHT):
            direction = 1 if key == pygame.K_RIGHT else -1
            settings = controls.step_setting(settings, names[self.selected_index], direction)
        elif key == pygame.K_t:
            settings = controls.toggle_trails(settings)
        elif key == pygame.K_c:
            settings = controls.cycle_color_mode(settings)
        elif key == pygame.K_b:
            settings = controls.cycle_base_color(settings)
        elif key == pygame.K_r:
            logging.info("Reset requested by user.")
            engine.reset()

        if settings is not engine.settings:
            engine.update_settings(settings)

    def _handle_click(self, pos: Tuple[int, int], engine: ParticleEngine):
        if self.panel_visible and self._panel_rect.collidepoint(pos):
            if self.reset_button_rect.collidepoint(pos):
                logging.info("Reset button clicked.")
                engine.reset()
            return
        engine.insert_at(float(pos[0]), float(pos[1]), DEFAULT_INSERT_COUNT)

    # --- Drawing ---

    def draw(self, engine: ParticleEngine):
        """Draws all particles and UI."""
        self.screen.fill(BACKGROUND_COLOR)
        particles = engine.particles

        # 1. Trails underneath everything
        self.trail_surface.fill((0, 0, 0, 0))
        if engine.settings.show_trails:
            trail_alpha = int(255 * TRAIL_ALPHA)
            for i in range(len(particles)):
                trail = particles.trail(i)
                if len(trail) < 2:
                    continue
                color = (*(int(c) for c in particles.colors[i]), trail_alpha)
                width = max(1, int(particles.radii[i] * TRAIL_WIDTH_RATIO))
                pygame.draw.lines(self.trail_surface, color, False, trail.tolist(), width)
        self.screen.blit(self.trail_surface, (0, 0))

        # 2. Glow first, then the particle body on top
        self.particle_surface.fill((0, 0, 0, 0))
        glow_alpha = int(255 * PARTICLE_GLOW_ALPHA)
        for i in range(len(particles)):
            center = (int(particles.positions[i, 0]), int(particles.positions[i, 1]))
            radius = particles.radii[i]
            r, g, b = (int(c) for c in particles.colors[i])

            glow_radius = max(1, int(radius * PARTICLE_GLOW_RATIO))
            pygame.draw.circle(self.particle_surface, (r, g, b, glow_alpha // 2), center, glow_radius)
            pygame.draw.circle(self.particle_surface, (r, g, b, glow_alpha), center, max(1, int(glow_radius * 0.75)))

            body_alpha = int(255 * particles.opacities[i])
            pygame.draw.circle(self.particle_surface, (r, g, b, body_alpha), center, max(1, int(radius)))
        self.screen.blit(self.particle_surface, (0, 0))

        # 3. UI
        if self.panel_visible:
            self._draw_panel(engine, pygame.mouse.get_pos())
        self._draw_hint()

        pygame.display.flip()

    def _draw_panel(self, engine: ParticleEngine, mouse_pos: Tuple[int, int]):
        panel = self._panel_rect
        self.screen.blit(self.ui_panel_surface, panel.topleft)

        x = panel.x + 15
        width = panel.width - 30
        current_y = 12

        title = self.font_title.render("Simulation Controls", True, self.text_color_title)
        self.screen.blit(title, (x, current_y))
        current_y += title.get_height() + 10

        selected = controls.ADJUSTABLE_SETTINGS[self.selected_index]
        for key, value in engine.settings.as_display_dict().items():
            current_y = self._draw_parameter_box(key, value, x, current_y, width, key == selected)

        stats = f"{len(engine.particles)} particles | {self.clock.get_fps():.0f} FPS"
        stats_surf = self.font_main.render(stats, True, self.text_color_key)
        self.screen.blit(stats_surf, (x, current_y + 6))
        current_y += stats_surf.get_height() + 14

        self.reset_button_rect = pygame.Rect(x, current_y, width, 30)
        is_hovered = self.reset_button_rect.collidepoint(mouse_pos)
        color = self.button_hover_color if is_hovered else self.button_color
        pygame.draw.rect(self.screen, color, self.reset_button_rect, border_radius=5)
        text_surf = self.font_main.render("Reset Simulation", True, self.text_color_title)
        self.screen.blit(text_surf, text_surf.get_rect(center=self.reset_button_rect.center))
        current_y = self.reset_button_rect.bottom + 14

        for keys, action in KEY_HELP:
            key_surf = self.font_main_bold.render(keys, True, self.text_color_key)
            action_surf = self.font_main.render(action, True, self.text_color_value)
            self.screen.blit(key_surf, (x, current_y))
            self.screen.blit(action_surf, (x + width // 2, current_y))
            current_y += self.font_main.get_linesize()

    def _draw_parameter_box(self, key: str, value: Any, x: int, y: int, width: int,
                            selected: bool) -> int:
        """Draws one "Key: value" box and returns the y below it."""
        display_key = key.replace('_', ' ').title()
        if isinstance(value, bool):
            display_value = "On" if value else "Off"
        elif isinstance(value, float):
            display_value = f"{value:.2f}"
        elif isinstance(value, tuple):
            display_value = to_hex(value)
        else:
            display_value = str(value)

        line_height = self.font_main.get_linesize()
        box_rect = pygame.Rect(x, y, width, line_height + 12)
        box_color = self.param_box_selected_color if selected else self.param_box_color
        box_surface = pygame.Surface(box_rect.size, pygame.SRCALPHA)
        pygame.draw.rect(box_surface, box_color, box_surface.get_rect(), border_radius=6)
        self.screen.blit(box_surface, box_rect.topleft)

        key_surf = self.font_main_bold.render(display_key, True, self.text_color_key)
        value_surf = self.font_main.render(display_value, True, self.text_color_value)
        self.screen.blit(key_surf, (x + 8, y + 6))
        self.screen.blit(value_surf, value_surf.get_rect(topright=(x + width - 8, y + 6)))

        if isinstance(value, tuple):
            swatch_center = (x + width - 16 - value_surf.get_width(), y + 6 + line_height // 2)
            pygame.draw.circle(self.screen, value, swatch_center, 5)

        return box_rect.bottom + self.param_box_spacing

    def _draw_hint(self):
        hint_surf = self.font_main.render(HINT_TEXT, True, self.text_color_hint)
        _, height = self.sim_size
        background = pygame.Surface((hint_surf.get_width() + 16, hint_surf.get_height() + 10), pygame.SRCALPHA)
        background.fill((31, 41, 55, 128))
        position = (16, height - background.get_height() - 16)
        self.screen.blit(background, position)
        self.screen.blit(hint_surf, (position[0] + 8, position[1] + 5))

    def close(self):
        """Shuts down Pygame."""
        pygame.font.quit()
        pygame.quit()
