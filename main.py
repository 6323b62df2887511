import os
import math
import argparse
import pygame
import config
from grid import load_grid_families
from scene import Scene, default_heading
from audio import BlipPlayer
from vec import Vec2


def draw_cross(surface, position, size, color, width):
    """Draw a point marker as two short crossing strokes."""
    x, y = position.x, position.y
    pygame.draw.line(surface, color, (int(x - size), int(y)), (int(x + size), int(y)), width)
    pygame.draw.line(surface, color, (int(x), int(y - size)), (int(x), int(y + size)), width)


def render_grid_family(surface, family, center, diag):
    """
    Draw every visible line of one family.

    Dashed lines are cut with the family's own dash_segments so the drawn
    dashes are exactly the ones the touch detector tests against.
    """
    width = max(1, int(round(family.thickness)))
    for _k, coord in family.visible_lines(diag):
        foot = family.line_foot(center, coord)
        for start, end in family.dash_segments(foot, diag):
            try:
                if not (start.is_finite() and end.is_finite()):
                    continue
                pygame.draw.line(surface, family.color, start.as_int_tuple(), end.as_int_tuple(), width)
            except (TypeError, ValueError, OverflowError):
                # If there's any error drawing, skip this segment
                continue


class GridRhythm:
    """
    Window, input and drawing around a Scene.

    Held arrow keys steer the shared heading, clicks add or remove points and
    every touch reported by the scene is passed on to the blip player.
    """
    def __init__(self, width=None, height=None, fps=None, families=None, speed=None,
                 muted=False, headless=False, max_frames=None, frame_callback=None):
        self.headless = headless
        if headless:
            # Use dummy video driver so pygame doesn't try to open a window
            os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
        pygame.init()

        self.width = width if width is not None else config.WINDOW_WIDTH
        self.height = height if height is not None else config.WINDOW_HEIGHT
        self.fps = fps if fps is not None else config.FPS
        if headless:
            self.screen = pygame.Surface((self.width, self.height))
        else:
            self.screen = pygame.display.set_mode((self.width, self.height))
            pygame.display.set_caption(config.WINDOW_TITLE)

        self.scene = Scene(self.width, self.height, families=families, heading=default_heading(speed))

        # Touch feedback: audible blip and a short marker flash
        self.player = None
        if not headless:
            self.player = BlipPlayer(muted=muted)
            self.scene.add_sink(self.player)
        self.flash = {}  # point_id -> frames remaining
        self.scene.add_sink(self._on_touch)

        # UI state
        self.show_ui = True
        self.max_frames = max_frames
        self.frame_callback = frame_callback
        self.frame_count = 0

        # Clock for consistent frame rate
        self.clock = pygame.time.Clock()
        self.running = True

        # Font for UI
        self.font = pygame.font.Font(None, config.UI_FONT_SIZE)

    def _on_touch(self, event):
        self.flash[event.point_id] = config.FLASH_FRAMES

    def handle_events(self):
        """Handle user input events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == config.KEY_EXIT:
                    self.running = False

                elif event.key == config.KEY_RESET:
                    self.scene.queue_reset()
                    self.flash.clear()

                elif event.key == config.KEY_MUTE:
                    if self.player is not None:
                        self.player.toggle_mute()

                elif event.key == config.KEY_TOGGLE_UI:
                    self.show_ui = not self.show_ui

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self.scene.queue_toggle(Vec2(float(event.pos[0]), float(event.pos[1])))

    def read_controls(self):
        """Held-key state as (turn, throttle), each -1, 0 or +1."""
        if self.headless:
            return 0, 0
        keys = pygame.key.get_pressed()
        turn = int(keys[config.KEY_ROTATE_RIGHT]) - int(keys[config.KEY_ROTATE_LEFT])
        throttle = int(keys[config.KEY_SPEED_UP]) - int(keys[config.KEY_SPEED_DOWN])
        return turn, throttle

    def update(self, dt):
        """Advance the scene by one frame."""
        if not self.headless:
            mx, my = pygame.mouse.get_pos()
            self.scene.update_hover(Vec2(float(mx), float(my)))

        turn, throttle = self.read_controls()
        events = self.scene.tick(dt, turn, throttle)

        for point_id in list(self.flash):
            self.flash[point_id] -= 1
            if self.flash[point_id] <= 0:
                del self.flash[point_id]
        return events

    def render(self):
        """Render the entire frame."""
        self.screen.fill(config.BACKGROUND_COLOR)

        for family in self.scene.families:
            render_grid_family(self.screen, family, self.scene.center, self.scene.diag)

        self.render_points()

        if self.show_ui and not self.headless:
            self.render_ui()

        if not self.headless:
            pygame.display.flip()

    def render_points(self):
        """Draw every tracked point; hovered and recently touched points stand out."""
        for index, point in enumerate(self.scene.points):
            if index == self.scene.hover_index:
                draw_cross(self.screen, point.position, config.MARKER_HOVER_SIZE,
                           config.MARKER_HOVER_COLOR, config.MARKER_WIDTH)
            elif point.id in self.flash:
                draw_cross(self.screen, point.position, config.MARKER_HOVER_SIZE,
                           config.FLASH_COLOR, config.MARKER_WIDTH)
            else:
                draw_cross(self.screen, point.position, config.MARKER_SIZE,
                           config.MARKER_COLOR, config.MARKER_WIDTH)

    def render_ui(self):
        """Render the user interface overlay."""
        y_offset = config.UI_MARGIN
        heading = self.scene.heading
        direction = heading.direction

        stats = [
            f"Speed: {heading.speed:.1f} px/s  Dir: ({direction.x:.2f}, {direction.y:.2f})",
            f"Points: {len(self.scene.points)}  Grids: {len(self.scene.families)}",
            f"Touches: {self.scene.touch_count}",
        ]
        if self.player is not None and (self.player.muted or not self.player.available):
            stats.append("Audio: muted")

        for stat in stats:
            stat_text = self.font.render(stat, True, config.UI_TEXT_COLOR)
            self.screen.blit(stat_text, (config.UI_MARGIN, y_offset))
            y_offset += config.UI_LINE_HEIGHT

        controls_start_y = self.height - config.CONTROLS_FROM_BOTTOM
        for i, control in enumerate(config.CONTROLS):
            color = config.UI_TEXT_COLOR if i == 0 else config.UI_SECONDARY_COLOR
            control_text = self.font.render(control, True, color)
            self.screen.blit(control_text, (config.UI_MARGIN, controls_start_y + i * config.CONTROLS_LINE_HEIGHT))

    def run(self):
        """Main loop."""
        while self.running:
            if self.headless:
                # Fixed dt in headless mode for deterministic output
                dt = 1.0 / float(self.fps)
            else:
                dt = min(self.clock.tick(self.fps) / 1000.0, config.MAX_TIME_STEP)

            self.handle_events()
            events = self.update(dt)
            self.render()

            if self.frame_callback is not None:
                self.frame_callback(self.screen, self.scene, events)

            self.frame_count += 1
            if self.max_frames is not None and self.frame_count >= self.max_frames:
                self.running = False

        pygame.quit()
        return self.scene.touch_count


def main():
    """Main function to start the visualizer."""
    parser = argparse.ArgumentParser(description="Parallel grid families sweep across the window and blip when they touch a point.")
    parser.add_argument("--width", type=int, default=config.WINDOW_WIDTH, help="Window width in pixels")
    parser.add_argument("--height", type=int, default=config.WINDOW_HEIGHT, help="Window height in pixels")
    parser.add_argument("--fps", type=int, default=config.FPS, help="Target FPS")
    parser.add_argument("--speed", type=float, default=config.DEFAULT_SPEED, help="Initial pattern speed in px/s")
    parser.add_argument("--grids", type=str, default=None, help="JSON file with grid families (default: built-in grids)")
    parser.add_argument("--mute", action="store_true", help="Start with blips muted")
    parser.add_argument("--headless", action="store_true", help="Run without a window or audio")
    parser.add_argument("--frames", type=int, default=None, help="Stop after this many frames")
    args = parser.parse_args()

    if args.speed < 0 or not math.isfinite(args.speed):
        parser.error("--speed must be a non-negative number")
    if args.headless and args.frames is None:
        parser.error("--headless needs --frames")

    families = load_grid_families(args.grids) if args.grids else None

    app = GridRhythm(
        width=args.width,
        height=args.height,
        fps=args.fps,
        families=families,
        speed=args.speed,
        muted=args.mute,
        headless=args.headless,
        max_frames=args.frames,
    )
    print(f"Grids: {len(app.scene.families)}, points: {len(app.scene.points)}, speed: {args.speed:.1f} px/s")
    touches = app.run()
    print(f"Touches: {touches} in {app.frame_count} frames")


if __name__ == "__main__":
    main()
