"""
🧬 Genetic Algorithm
Orchestrates the generation loop: selection, crossover, mutation,
reinsertion and termination over a population
"""

import threading
import time
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from core.config import get_settings
from core.logger import get_event_logger, get_ga_logger
from .chromosome import ChromosomeBase
from .crossover import CrossoverBase
from .exceptions import GeneticAlgorithmException
from .fitness_evaluator import FitnessEvaluator, FitnessFunction, as_evaluator
from .mutation import MutationBase
from .population import Population
from .randomization import get_randomization
from .reinsertion import ElitistReinsertion, ReinsertionBase
from .selection import SelectionBase
from .termination import GenerationNumberTermination, TerminationBase


class GeneticAlgorithmState(Enum):
    """States of a genetic algorithm run"""
    NOT_STARTED = "not_started"
    STARTED = "started"
    STOPPED = "stopped"
    RESUMED = "resumed"
    TERMINATION_REACHED = "termination_reached"
    ERROR = "error"


@dataclass
class GenerationEvent:
    """Payload sent to observers"""
    generation_number: int
    best_chromosome: Optional[ChromosomeBase]
    time_evolving: float
    state: GeneticAlgorithmState

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generation_number": self.generation_number,
            "best_fitness": self.best_chromosome.fitness if self.best_chromosome else None,
            "time_evolving": self.time_evolving,
            "state": self.state.value
        }


class GeneticAlgorithmObserver:
    """
    Receives run notifications.

    Methods are no-ops by default; override the ones of interest. Exceptions
    raised here are logged and never abort the run.
    """

    def on_generation_ran(self, event: GenerationEvent):
        pass

    def on_termination_reached(self, event: GenerationEvent):
        pass

    def on_stopped(self, event: GenerationEvent):
        pass


class CallbackObserver(GeneticAlgorithmObserver):
    """Observer built from plain callables."""

    def __init__(
        self,
        on_generation_ran: Optional[Callable[[GenerationEvent], None]] = None,
        on_termination_reached: Optional[Callable[[GenerationEvent], None]] = None,
        on_stopped: Optional[Callable[[GenerationEvent], None]] = None
    ):
        self._on_generation_ran = on_generation_ran
        self._on_termination_reached = on_termination_reached
        self._on_stopped = on_stopped

    def on_generation_ran(self, event):
        if self._on_generation_ran:
            self._on_generation_ran(event)

    def on_termination_reached(self, event):
        if self._on_termination_reached:
            self._on_termination_reached(event)

    def on_stopped(self, event):
        if self._on_stopped:
            self._on_stopped(event)


class GeneticAlgorithm:
    """
    Genetic algorithm orchestrator.

    Each generation selects ``population.min_size`` parents, crosses them in
    consecutive groups of ``crossover.parents_number`` with probability
    ``crossover_probability``, mutates every child and lets the reinsertion
    build the next generation, which is then evaluated and checked against
    the termination.

    ``stop()`` is cooperative: the request is honoured once the running
    generation has ended, so a stopped population is always fully evaluated
    and ``resume()`` continues from it.
    """

    DEFAULT_CROSSOVER_PROBABILITY = 0.75
    DEFAULT_MUTATION_PROBABILITY = 0.1

    def __init__(
        self,
        population: Population,
        fitness: Union[FitnessEvaluator, FitnessFunction],
        selection: SelectionBase,
        crossover: CrossoverBase,
        mutation: MutationBase,
        reinsertion: Optional[ReinsertionBase] = None,
        termination: Optional[TerminationBase] = None
    ):
        """
        Initialize genetic algorithm.

        Args:
            population: Population to evolve
            fitness: Fitness evaluator, or a plain fitness function
            selection: Parent selection operator
            crossover: Crossover operator
            mutation: Mutation operator
            reinsertion: Next generation builder (elitist by default)
            termination: Stop criterion (one generation by default)
        """
        for name, value in (("population", population), ("fitness", fitness),
                            ("selection", selection), ("crossover", crossover),
                            ("mutation", mutation)):
            if value is None:
                raise TypeError(f"{name} should not be None.")

        self.population = population
        self.fitness_evaluator = as_evaluator(fitness, get_settings().evaluation_workers)
        self.selection = selection
        self.crossover = crossover
        self.mutation = mutation
        self.reinsertion = reinsertion or ElitistReinsertion()
        self.termination = termination or GenerationNumberTermination(1)

        self.crossover_probability = self.DEFAULT_CROSSOVER_PROBABILITY
        self.mutation_probability = self.DEFAULT_MUTATION_PROBABILITY

        self.run_id = uuid.uuid4().hex[:8]
        self.logger = get_ga_logger(self.run_id)
        self._events = get_event_logger("genetic.events", run_id=self.run_id)

        self._state = GeneticAlgorithmState.NOT_STARTED
        self._state_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._background_error: Optional[BaseException] = None
        self._observers: List[GeneticAlgorithmObserver] = []

        self._time_evolving = 0.0
        self._clock_started_at: Optional[float] = None

        self.last_error: Optional[BaseException] = None

    # Properties

    @property
    def state(self) -> GeneticAlgorithmState:
        """Current state of the algorithm."""
        return self._state

    @property
    def is_running(self) -> bool:
        """True while the generation loop is active."""
        return self._state in (GeneticAlgorithmState.STARTED, GeneticAlgorithmState.RESUMED)

    @property
    def generations_number(self) -> int:
        """Number of generations ended so far."""
        return self.population.generations_number

    @property
    def best_chromosome(self) -> Optional[ChromosomeBase]:
        """Best chromosome of the last ended generation, None before the first one."""
        return self.population.best_chromosome

    @property
    def time_evolving(self) -> float:
        """Seconds spent evolving, accumulated across start/resume cycles."""
        started_at = self._clock_started_at
        if started_at is None:
            return self._time_evolving
        return self._time_evolving + (time.perf_counter() - started_at)

    # Observers

    def subscribe(self, observer: GeneticAlgorithmObserver):
        if observer is None:
            raise TypeError("observer should not be None.")
        if observer not in self._observers:
            self._observers.append(observer)

    def unsubscribe(self, observer: GeneticAlgorithmObserver):
        if observer in self._observers:
            self._observers.remove(observer)

    # Control

    def start(self, background: bool = False):
        """
        Start a new run from a fresh initial generation.

        Args:
            background: Run the loop on a dedicated thread (see ``join``)
        """
        self._validate_probabilities()

        with self._state_lock:
            if self.is_running:
                raise GeneticAlgorithmException("The genetic algorithm is already running.")
            self._stop_event.clear()
            self._time_evolving = 0.0
            self.last_error = None
            self._set_state(GeneticAlgorithmState.STARTED)

        self.logger.info(
            f"Starting genetic algorithm: population {self.population.min_size}-"
            f"{self.population.max_size}, termination {self.termination!r}"
        )
        self._launch(initialize=True, background=background)

    def resume(self, background: bool = False):
        """
        Continue a stopped run from its preserved population.

        Raises:
            GeneticAlgorithmException: If the run was never started, is running,
                failed, or its termination is already reached
        """
        self._validate_probabilities()

        with self._state_lock:
            if self._state == GeneticAlgorithmState.NOT_STARTED:
                raise GeneticAlgorithmException(
                    "Attempt to resume a genetic algorithm which was not yet started."
                )
            if self.is_running:
                raise GeneticAlgorithmException("The genetic algorithm is already running.")
            if self._state == GeneticAlgorithmState.ERROR:
                raise GeneticAlgorithmException(
                    "Attempt to resume a genetic algorithm whose last run failed. Start it again."
                )

            if self.termination.has_reached(self):
                raise GeneticAlgorithmException(
                    f"Attempt to resume a genetic algorithm with a termination "
                    f"({self.termination!r}) already reached. Please, specify a new "
                    f"termination or extend the current one."
                )

            self._stop_event.clear()
            self._set_state(GeneticAlgorithmState.RESUMED)

        self.logger.info(f"Resuming genetic algorithm at generation {self.generations_number}")
        self._launch(initialize=False, background=background)

    def stop(self):
        """Request a stop at the next generation boundary."""
        if self._state == GeneticAlgorithmState.NOT_STARTED:
            raise GeneticAlgorithmException(
                "Attempt to stop a genetic algorithm which was not yet started."
            )

        if not self.is_running:
            self.logger.debug(f"Stop ignored, the genetic algorithm is {self._state.value}")
            return

        self._stop_event.set()
        self.logger.info("Stop requested")

    def join(self, timeout: Optional[float] = None):
        """
        Wait for a background run to finish.

        Re-raises the exception that made the background run fail.
        """
        thread = self._thread
        if thread is not None:
            thread.join(timeout)
            if thread.is_alive():
                return

        error = self._background_error
        if error is not None:
            self._background_error = None
            raise error

    # Loop

    def _launch(self, initialize: bool, background: bool):
        self._background_error = None

        if background:
            self._thread = threading.Thread(
                target=self._run_in_background,
                args=(initialize,),
                name=f"GeneticAlgorithm-{self.run_id}",
                daemon=True
            )
            self._thread.start()
        else:
            self._run(initialize)

    def _run_in_background(self, initialize: bool):
        try:
            self._run(initialize)
        except Exception as e:
            self._background_error = e

    def _run(self, initialize: bool):
        self._clock_started_at = time.perf_counter()
        if self._state == GeneticAlgorithmState.RESUMED:
            self._set_state(GeneticAlgorithmState.STARTED)

        try:
            if initialize:
                self.population.create_initial_generation()
                reached = self._end_current_generation()
            else:
                reached = False

            while not reached:
                if self._stop_event.is_set():
                    self._pause_clock()
                    self._set_state(GeneticAlgorithmState.STOPPED)
                    self.logger.info(f"Stopped at generation {self.generations_number}")
                    self._notify("on_stopped")
                    return

                reached = self._evolve_one_generation()

        except Exception as e:
            self._pause_clock()
            self.last_error = e
            self._set_state(GeneticAlgorithmState.ERROR)
            self.logger.error(
                f"Genetic algorithm failed at generation {self.generations_number + 1}: {e}",
                exc_info=True
            )
            raise

    def _evolve_one_generation(self) -> bool:
        parents = self.selection.select_parents(self.population.min_size, self.population)
        offspring = self._cross(parents)
        self._mutate(offspring)

        chromosomes = self.reinsertion.select_chromosomes(self, offspring, parents)
        self.population.create_new_generation(chromosomes)

        return self._end_current_generation()

    def _cross(self, parents: List[ChromosomeBase]) -> List[ChromosomeBase]:
        size = self.crossover.parents_number
        randomization = get_randomization()

        offspring = []
        # a trailing group smaller than parents_number is not crossed
        for i in range(0, len(parents) - size + 1, size):
            if randomization.get_float() < self.crossover_probability:
                offspring.extend(self.crossover.cross(parents[i:i + size]))

        return offspring

    def _mutate(self, offspring: List[ChromosomeBase]):
        for child in offspring:
            self.mutation.mutate(child, self.mutation_probability)

    def _end_current_generation(self) -> bool:
        self.population.end_current_generation(self.fitness_evaluator)

        best = self.best_chromosome
        self._events.debug(
            "generation_ran",
            generation=self.generations_number,
            best_fitness=best.fitness if best else None,
            time_evolving=round(self.time_evolving, 6)
        )
        self._notify("on_generation_ran")

        if self.termination.has_reached(self):
            self._pause_clock()
            self._set_state(GeneticAlgorithmState.TERMINATION_REACHED)
            self.logger.info(
                f"Termination reached at generation {self.generations_number}: "
                f"best fitness {best.fitness:.6f}, {self.time_evolving:.3f}s"
            )
            self._notify("on_termination_reached")
            return True

        return False

    # Helpers

    def _validate_probabilities(self):
        if not 0.0 <= self.crossover_probability <= 1.0:
            raise ValueError("crossover_probability should be between 0 and 1.")
        if not 0.0 <= self.mutation_probability <= 1.0:
            raise ValueError("mutation_probability should be between 0 and 1.")

    def _pause_clock(self):
        started_at = self._clock_started_at
        if started_at is not None:
            self._time_evolving += time.perf_counter() - started_at
            self._clock_started_at = None

    def _set_state(self, state: GeneticAlgorithmState):
        previous = self._state
        self._state = state
        self._events.info("state_changed", previous=previous.value, state=state.value,
                          generation=self.generations_number)

    def _create_event(self) -> GenerationEvent:
        return GenerationEvent(
            generation_number=self.generations_number,
            best_chromosome=self.best_chromosome,
            time_evolving=self.time_evolving,
            state=self._state
        )

    def _notify(self, method_name: str):
        event = self._create_event()
        for observer in list(self._observers):
            try:
                getattr(observer, method_name)(event)
            except Exception as e:
                self.logger.warning(
                    f"Observer {type(observer).__name__}.{method_name} failed: {e}",
                    exc_info=True
                )

    def get_status(self) -> Dict[str, Any]:
        """Get current run status."""
        best = self.best_chromosome
        return {
            'run_id': self.run_id,
            'state': self._state.value,
            'generations_number': self.generations_number,
            'best_fitness': best.fitness if best else None,
            'time_evolving': self.time_evolving,
            'evaluation_stats': self.fitness_evaluator.get_evaluation_stats()
        }

    def __repr__(self) -> str:
        return (f"GeneticAlgorithm(state={self._state.value}, "
                f"generations_number={self.generations_number})")
