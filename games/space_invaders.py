from __future__ import annotations
import random
from dataclasses import dataclass, field
from typing import Dict, List, Tuple
from . import BaseGame, register_game
from progress import ProgressRecord
from systems.collision import hits_around, hits_span
from systems.entities import UFO, Entity, Explosion, Position, Shield
from systems.intents import Intent
from systems.rules import get_rules
from systems.scoring import ScoreEvent, best, level_bonus
from systems.snapshot import Snapshot, Sprite, Status, Tone

RULES = get_rules("space_invaders").data
SPACING = RULES["enemy_spacing"]
GLYPH_WIDTH = 3

@dataclass(frozen=True)
class AlienSprite:
    frames: Tuple[str, str]
    color: str
    points: int

# One entry per enemy row, top row first; the top row is worth the most
ALIEN_SPRITES = [
    AlienSprite(("⟨◉⟩", "⟩◉⟨"), "enemy_elite", 30),
    AlienSprite(("⌐█⌐", "¬█¬"), "enemy", 20),
    AlienSprite(("⌐█⌐", "¬█¬"), "enemy", 20),
    AlienSprite(("/▼\\", "\\▼/"), "enemy_alt", 10),
    AlienSprite(("/▼\\", "\\▼/"), "enemy_alt", 10),
]
SPRITE_BY_COLOR: Dict[str, AlienSprite] = {sprite.color: sprite for sprite in ALIEN_SPRITES}

EXPLOSION_FRAMES = ["✦", "✶", "✴", "·"]
SHIELD_GLYPHS = ["█", "▓", "▒", "░", " "]

@dataclass(frozen=True)
class LevelConfig:
    enemy_rows: int
    enemy_cols: int
    base_speed: int          # ticks between enemy steps at full strength; larger is slower
    shoot_chance: float
    max_enemy_bullets: int

def level_config(level: int) -> LevelConfig:
    return LevelConfig(
        enemy_rows=min(5, 3 + (level - 1) // 3),
        enemy_cols=min(10, 5 + (level - 1) // 2),
        base_speed=max(2, 6 - level // 2),
        shoot_chance=min(0.1, 0.02 + level * 0.01),
        max_enemy_bullets=min(6, 2 + level // 2),
    )

def fitted_cols(config: LevelConfig, width: int) -> int:
    return min(config.enemy_cols, (width - 16) // SPACING)

@dataclass
class InvadersState:
    player: Entity
    enemies: List[Entity]
    shields: List[Shield]
    bullets: List[Entity] = field(default_factory=list)
    enemy_bullets: List[Entity] = field(default_factory=list)
    ufo: UFO = field(default_factory=lambda: UFO(Position(-5, 0)))
    explosions: List[Explosion] = field(default_factory=list)
    score: int = 0
    high_score: int = 0
    lives: int = RULES["lives"]
    level: int = 1
    game_over: bool = False
    won: bool = False
    paused: bool = False
    width: int = 50
    height: int = 22
    enemy_direction: int = 1
    tick_count: int = 0
    total_enemies: int = 0

def board_size(term_cols: int, term_rows: int) -> tuple[int, int]:
    min_w, max_w = RULES["board_width"]
    min_h, max_h = RULES["board_height"]
    return min(max_w, max(min_w, term_cols - 10)), min(max_h, max(min_h, term_rows - 12))

def init_invaders(width: int, height: int, level: int = 1, high_score: int = 0) -> InvadersState:
    config = level_config(level)
    cols = fitted_cols(config, width)
    rows = config.enemy_rows
    start_x = (width - cols * SPACING) // 2

    enemies: List[Entity] = []
    for row in range(rows):
        sprite = ALIEN_SPRITES[min(row, len(ALIEN_SPRITES) - 1)]
        for col in range(cols):
            enemies.append(Entity(Position(start_x + col * SPACING, 2 + row * 2), sprite.frames[0], sprite.color))

    spacing = width // 5
    shields = [Shield(Position(spacing + i * spacing, height - 7), RULES["shield_health"]) for i in range(4)]

    return InvadersState(
        player=Entity(Position(width // 2 - 2, height - 2), "╔▲╗", "player"),
        enemies=enemies,
        shields=shields,
        high_score=high_score,
        level=level,
        width=width,
        height=height,
        total_enemies=len(enemies),
    )

def move_player(state: InvadersState, direction: int) -> bool:
    new_x = state.player.pos.x + direction
    if 1 <= new_x < state.width - 2:
        state.player.pos.x = new_x
        return True
    return False

def shoot(state: InvadersState) -> bool:
    if len(state.bullets) >= RULES["bullet_limit"]:
        return False
    pos = state.player.pos
    state.bullets.append(Entity(Position(pos.x + 1, pos.y - 1), "│", "bullet"))
    return True

def add_explosion(state: InvadersState, x: int, y: int) -> None:
    state.explosions.append(Explosion(Position(x, y)))

def explosion_glyph(frame: int) -> str:
    return EXPLOSION_FRAMES[frame] if 0 <= frame < len(EXPLOSION_FRAMES) else " "

def shield_glyph(health: int) -> str:
    index = 4 - health
    return SHIELD_GLYPHS[index] if 0 <= index < len(SHIELD_GLYPHS) else " "

def move_interval(state: InvadersState) -> int:
    """Enemies step faster as their ranks thin out."""
    config = level_config(state.level)
    ratio = len(state.enemies) / state.total_enemies if state.total_enemies else 0
    return max(RULES["min_move_interval"], int(config.base_speed * ratio))

def _animate(state: InvadersState) -> None:
    frame = (state.tick_count // RULES["anim_every"]) % 2
    for enemy in state.enemies:
        sprite = SPRITE_BY_COLOR.get(enemy.color)
        if sprite:
            enemy.glyph = sprite.frames[frame]

def _age_explosions(state: InvadersState) -> None:
    for explosion in state.explosions:
        explosion.frame += 1
    state.explosions = [e for e in state.explosions if e.frame < len(EXPLOSION_FRAMES)]

def _advance_ufo(state: InvadersState, rng: random.Random) -> None:
    ufo = state.ufo
    if ufo.active:
        ufo.pos.x += 1
        if ufo.pos.x > state.width:
            ufo.active = False
        return
    chance = 0.001 + state.level * 0.0005
    if rng.random() < chance:
        ufo.active = True
        ufo.pos.x = -4
        ufo.points = rng.choice(RULES["ufo_values"])

def bottom_shooters(enemies: List[Entity]) -> List[Entity]:
    """Lowest enemy of every occupied column."""
    columns: Dict[int, Entity] = {}
    for enemy in enemies:
        col = enemy.pos.x // SPACING
        current = columns.get(col)
        if current is None or enemy.pos.y > current.pos.y:
            columns[col] = enemy
    return list(columns.values())

def enemy_shoot(state: InvadersState, rng: random.Random) -> bool:
    config = level_config(state.level)
    if len(state.enemy_bullets) >= config.max_enemy_bullets or not state.enemies:
        return False
    if rng.random() >= config.shoot_chance:
        return False
    shooter = rng.choice(bottom_shooters(state.enemies))
    state.enemy_bullets.append(Entity(Position(shooter.pos.x + 1, shooter.pos.y + 1), "▼", "enemy_bullet"))
    return True

def _hit_shield(state: InvadersState, bullet: Entity) -> bool:
    for shield in state.shields:
        if shield.health > 0 and bullet.pos.y == shield.pos.y and hits_around(bullet.pos.x, shield.pos.x, 2):
            shield.health -= 1
            return True
    return False

def _player_bullet_hits(state: InvadersState, bullet: Entity) -> bool:
    ufo = state.ufo
    if ufo.active and bullet.pos.y == ufo.pos.y and hits_span(bullet.pos.x, ufo.pos.x, GLYPH_WIDTH):
        add_explosion(state, ufo.pos.x + 1, ufo.pos.y)
        state.score += ufo.points
        ufo.active = False
        return True

    for enemy in state.enemies:
        if bullet.pos.y == enemy.pos.y and hits_span(bullet.pos.x, enemy.pos.x, GLYPH_WIDTH):
            state.enemies.remove(enemy)
            add_explosion(state, enemy.pos.x + 1, enemy.pos.y)
            sprite = SPRITE_BY_COLOR.get(enemy.color)
            state.score += sprite.points if sprite else 10
            return True

    return _hit_shield(state, bullet)

def _enemy_bullet_hits(state: InvadersState, bullet: Entity) -> bool:
    player = state.player
    if bullet.pos.y == player.pos.y and hits_span(bullet.pos.x, player.pos.x, GLYPH_WIDTH):
        state.lives -= 1
        add_explosion(state, player.pos.x, player.pos.y)
        player.pos.x = state.width // 2
        if state.lives <= 0:
            state.game_over = True
            state.high_score = best(state.high_score, state.score)
        return True
    return _hit_shield(state, bullet)

def _march(state: InvadersState) -> None:
    at_edge = any(
        (state.enemy_direction == 1 and enemy.pos.x >= state.width - 4)
        or (state.enemy_direction == -1 and enemy.pos.x <= 1)
        for enemy in state.enemies
    )
    if not at_edge:
        for enemy in state.enemies:
            enemy.pos.x += state.enemy_direction
        return

    state.enemy_direction *= -1
    danger_row = state.height - 4
    for enemy in state.enemies:
        enemy.pos.y += 1
    if any(enemy.pos.y >= danger_row for enemy in state.enemies):
        state.game_over = True
        state.high_score = best(state.high_score, state.score)

def update_invaders(state: InvadersState, rng: random.Random) -> None:
    if state.game_over or state.won or state.paused:
        return

    state.tick_count += 1
    tick = state.tick_count

    if tick % RULES["anim_every"] == 0:
        _animate(state)
    _age_explosions(state)

    if tick % RULES["ufo_every"] == 0:
        _advance_ufo(state, rng)

    for bullet in state.bullets:
        bullet.pos.y -= 1
    state.bullets = [b for b in state.bullets if b.pos.y >= 0]

    if tick % RULES["enemy_bullet_every"] == 0:
        for bullet in state.enemy_bullets:
            bullet.pos.y += 1
        state.enemy_bullets = [b for b in state.enemy_bullets if b.pos.y < state.height]

    if tick % RULES["enemy_shoot_every"] == 0:
        enemy_shoot(state, rng)

    state.bullets = [b for b in state.bullets if not _player_bullet_hits(state, b)]
    state.enemy_bullets = [b for b in state.enemy_bullets if not _enemy_bullet_hits(state, b)]
    if state.game_over:
        return

    if not state.enemies:
        state.won = True
        state.score += level_bonus(ScoreEvent(level=state.level))
        state.high_score = best(state.high_score, state.score)
        return

    if tick % move_interval(state) == 0:
        _march(state)

@register_game("space_invaders")
class SpaceInvadersGame(BaseGame):
    title = "★ S P A C E   I N V A D E R S ★"

    @classmethod
    def board_size(cls, term_cols: int, term_rows: int) -> tuple[int, int]:
        return board_size(term_cols, term_rows)

    def new_state(self, record: ProgressRecord) -> InvadersState:
        width, height = self.board_size(self.term_cols, self.term_rows)
        if not record.can_resume:
            return init_invaders(width, height, 1, record.high_score)
        state = init_invaders(width, height, max(1, record.level), record.high_score)
        state.lives = record.lives
        state.score = record.score
        return state

    @property
    def is_terminal(self) -> bool:
        return self.state.game_over or self.state.won

    def on_intent(self, intent: Intent) -> bool:
        state = self.state
        if intent is Intent.NEW_GAME:
            self.store.reset()
            width, height = self.board_size(self.term_cols, self.term_rows)
            self.state = init_invaders(width, height, 1, state.high_score)
            self.terminal_saved = False
            self.save_progress()
            return True
        if intent is Intent.RESTART:
            if not self.is_terminal:
                return False
            if state.won:
                self.store.save(state.high_score, state.level + 1, state.score, RULES["lives"])
            else:
                # A lost run always restarts from the first level
                self.store.save(state.high_score, 1, 0, RULES["lives"])
            self.reset()
            return True
        if self.is_terminal or state.paused:
            return False
        if intent is Intent.MOVE_LEFT:
            return move_player(state, -1)
        if intent is Intent.MOVE_RIGHT:
            return move_player(state, 1)
        if intent is Intent.FIRE:
            return shoot(state)
        return False

    def step(self) -> None:
        state = self.state
        state.high_score = best(state.high_score, state.score)
        update_invaders(state, self.rng)

    def save_progress(self) -> None:
        state = self.state
        self.store.save(state.high_score, state.level, state.score, state.lives)

    def snapshot(self) -> Snapshot:
        state = self.state
        sprites: List[Sprite] = []
        for shield in state.shields:
            if shield.health > 0:
                for dx in range(-2, 3):
                    sprites.append(Sprite(shield.pos.x + dx, shield.pos.y, shield_glyph(shield.health), "shield"))
        for enemy in state.enemies:
            sprites.append(Sprite(enemy.pos.x, enemy.pos.y, enemy.glyph, enemy.color))
        if state.ufo.active:
            sprites.append(Sprite(state.ufo.pos.x, state.ufo.pos.y, "<O>", "ufo"))
        for bullet in state.bullets + state.enemy_bullets:
            sprites.append(Sprite(bullet.pos.x, bullet.pos.y, bullet.glyph, bullet.color))
        player = state.player
        sprites.append(Sprite(player.pos.x, player.pos.y, player.glyph, player.color))
        for explosion in state.explosions:
            sprites.append(Sprite(explosion.pos.x, explosion.pos.y, explosion_glyph(explosion.frame), "explosion"))

        hi = state.high_score
        if state.game_over:
            status = Status(f"☠ GAME OVER - SCORE: {state.score} - HI: {hi} │ R=Restart │ N=New │ Q=Menu", Tone.DANGER)
        elif state.won:
            status = Status(f"★ LEVEL COMPLETE! HI: {hi} - R for next level", Tone.SUCCESS)
        elif state.paused:
            status = Status(f"HI: {hi} │ ⏸ PAUSED - P=Continue", Tone.WARNING)
        else:
            status = Status(f"HI: {hi} │ ← → MOVE │ SPACE FIRE │ P PAUSE │ Q MENU", Tone.NEUTRAL)

        return Snapshot(
            title=self.title,
            width=state.width,
            height=state.height,
            sprites=tuple(sprites),
            stats={"score": state.score, "high_score": hi, "lives": state.lives, "level": state.level},
            status=status,
        )
