import logging

from holarchy import Simulation

def main():
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    sim = Simulation(seed=13)

    # Seed a population spread over the first few levels
    sim.spawn_random_particles(40)

    print('\n=== Initial frame ===')
    print(sim.frame().to_text_block())

    # Run a couple of seconds of simulated time at 60 fps
    frame = sim.run(120, delta_time=1 / 60)

    print('\n=== After 120 frames ===')
    print(frame.to_text_block())

    # Query the memory layer
    print('\n=== Recognition ===')
    summary = sim.summary()
    for level, info in summary['levels'].items():
        print(f'- level {level}: recognized={info["recognized"]}, coherence={info["coherence"]}')
    print(f'- overall coherence: {summary["coherence"]}')

if __name__ == '__main__':
    main()
