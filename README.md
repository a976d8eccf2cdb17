# kinematic_feet

Building blocks for kinematic character controllers in 3D games and
simulations. A character is a swept sphere that slides along walls, stays on
walkable ground, steps over small ledges, rides moving platforms and pushes
dynamic bodies.

Vectors are plain `numpy` arrays of three floats. Every function that takes a
vector also accepts a list or tuple of three numbers.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `kinematic_feet.vectors`: vector helpers such as `as_vec3`,
  `normalize_or_zero`, `try_direction`, `direction_and_length`,
  `project_onto`, `reject_from`, `angle_between` and `clamp_length_max`.
- `kinematic_feet.sweep`: the collision world. `SpatialQuery` holds static
  half-spaces (`add_half_space`) and spheres (`add_sphere`) and answers
  `shape_hits` and `ray_hits`, nearest first, as `ShapeHit` and `RayHit`
  records. The cast shape is a sphere: either a radius or any object with a
  `radius` attribute. Rotation is accepted but has no effect. `QueryFilter`
  selects colliders by layer `mask` and `excluded_entities`.
  `collision_sweep` subtracts the skin width from each hit and returns the
  first `SweepHitData` that the filter callback accepts.
- `kinematic_feet.projection`: `Surface` (built with
  `Surface.from_normal`), `CollisionState`, `project_velocity`,
  `detect_crease`, `align_with_surface`, `project_on_surface` and
  `shift_to_surface`. Together they decide how velocity is redirected when the
  shape meets walls, slopes and creases.
- `kinematic_feet.collide_and_slide`: `collide_and_slide`, the iterative
  sweep-and-slide loop, with `MovementState`, `MovementHitData`,
  `CollideAndSlideConfig` and `CollisionResponse` (`SLIDE`, `SKIP`,
  `STOP`).
- `kinematic_feet.grounding`: `Ground`, `Grounding` (with `is_grounded`,
  `ground`, `detach`, `normal`, `entity`), `GroundingConfig`,
  `GroundingState`, the `OnGroundEnter` and `OnGroundLeave` events,
  `walkable_angle`, `is_walkable`, `find_surface_normal` and
  `update_grounding`. `update_grounding` commits the pending ground and
  returns the new `Grounding` together with any enter or leave event.
- `kinematic_feet.ground_detection`: `detect_ground` looks for ground below
  the character, stores it in `GroundingState.pending` and returns the
  position, snapped onto the ground when `snap_to_surface` is set.
- `kinematic_feet.stepping`: `SteppingConfig`, `SteppingBehaviour`,
  `StepOutput` and `perform_step`, which climbs ledges up to
  `max_vertical` high.
- `kinematic_feet.movement`: `CharacterMovement`, `MoveInput`,
  `BrakeFactor`, `CharacterGravity`, `GroundFriction`, `CharacterDrag`,
  `CharacterBounce` and `BounceBehaviour`, with the step functions
  `acceleration`, `acceleration_with_brake`, `apply_acceleration`,
  `apply_gravity`, `apply_friction`, `apply_drag`, `bounce_on_hit`,
  `jump`, `drag_factor`, `friction_factor`, `feet_offset` and
  `feet_position`. These functions return the new velocity instead of
  changing the one passed in.
- `kinematic_feet.moving_platform`: `InheritedVelocity` (with
  `InheritedVelocity.at_point`), `inherited_velocity_at_point`,
  `move_with_platform` and `apply_inherited_velocity_on_ground_leave`.
- `kinematic_feet.character`: `Character`, whose `move` method runs
  collide-and-slide with stepping for one time step and returns the events
  raised: `OnHit`, `OnStep`, `CollisionStarted` and `CollisionEnded`.
- `kinematic_feet.depenetrate`: `depenetrate` pushes a character out of the
  contact manifolds (`ContactManifold`) that a physics engine reports and
  returns a `DepenetrationResult`.
- `kinematic_feet.physics_interaction`: `push_on_hit` pushes a dynamic
  `BodyState` that the character ran into. The lower-level
  `apply_acceleration_on_point` and `apply_impulse_on_point` are also
  available.

## Example

```python
from kinematic_feet.character import Character
from kinematic_feet.collide_and_slide import CollideAndSlideConfig
from kinematic_feet.ground_detection import detect_ground
from kinematic_feet.grounding import update_grounding
from kinematic_feet.movement import CharacterGravity, apply_gravity
from kinematic_feet.sweep import SpatialQuery

world = SpatialQuery()
world.add_half_space("floor", [0.0, 1.0, 0.0])
world.add_sphere("rock", [3.0, 0.0, 0.0], 0.5)

player = Character(entity="player", shape=0.4, position=[0.0, 1.0, 0.0], velocity=[2.0, 0.0, 0.0])
config = CollideAndSlideConfig()
dt = 1.0 / 60.0

for _ in range(120):
    player.velocity = apply_gravity(
        player.velocity, CharacterGravity.EARTH, [0.0, -9.81, 0.0], player.grounding, None, dt
    )
    events = player.move(world, dt, config)
    player.position = detect_ground(
        player.position,
        player.rotation,
        player.shape,
        player.grounding,
        player.grounding_config,
        player.grounding_state,
        config,
        world,
        player.query_filter,
    )
    player.grounding, ground_event = update_grounding(player.grounding_state)
```

## Defaults

| Setting | Default |
| --- | --- |
| `CollideAndSlideConfig.max_iterations` | 4 |
| `CollideAndSlideConfig.skin_width` | 0.05 |
| `CollideAndSlideConfig.max_penetration_retraction` | 0.0 |
| `GroundingConfig.up_direction` | (0, 1, 0) |
| `GroundingConfig.max_angle` | π/4 |
| `GroundingConfig.max_distance` | 0.2 |
| `GroundingConfig.max_iterations` | 2 |
| `SteppingConfig.max_vertical` | 0.25 |
| `SteppingConfig.max_horizontal` | 0.4 |
| `SteppingConfig.max_substeps` | 8 |
| `SteppingConfig.behaviour` | `SteppingBehaviour.GROUNDED` |
| `CharacterMovement.target_speed` | 8.0 |
| `CharacterMovement.acceleration` | 100.0 |
| `GroundFriction.value` | 60.0 |
| `CharacterDrag.value` | 0.01 |
| `CharacterBounce.restitution` | 0.9 |

## What it does not do

The package has no scheduler or entity system. You call the functions once per
fixed time step and decide the order yourself. It does not integrate rigid
bodies, render anything or draw debug shapes. Its built-in world knows only
half-spaces and spheres, and it casts only spheres. It has no command-line
program.