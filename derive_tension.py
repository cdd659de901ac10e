"""
Slack Pendulum: Symbolic Tension Derivation
===========================================
Derives the string tension used by the tension state machine with SymPy.

Generalized coordinate:
    theta (θ) - String angle from the +x axis (1.5*pi at the bottom)

Steps:
1. Lagrangian of a point mass on a rigid string, equation of motion
2. Energy conservation along a taut arc starting at alpha with omega0
3. Radial Newton equation, solved for the tension T
"""

import sympy as sp
from sympy import sin, cos, symbols, diff, simplify, Rational
from sympy.physics.mechanics import dynamicsymbols
from sympy.utilities.lambdify import lambdify


def derive_equation_of_motion():
    """
    Equation of motion of a taut pendulum from its Lagrangian.

    Returns
    -------
    sympy.Expr : theta'' as a function of theta
    """
    t = sp.Symbol('t')
    theta = dynamicsymbols('theta')
    m, r, g = symbols('m r g', positive=True)

    d_theta = diff(theta, t)

    # Position measured from the anchor, angle from +x
    x = r * cos(theta)
    y = r * sin(theta)

    T_kin = Rational(1, 2) * m * (diff(x, t)**2 + diff(y, t)**2)
    V = m * g * y
    L = T_kin - V

    eom = diff(diff(L, d_theta), t) - diff(L, theta)
    dd_theta = sp.solve(eom, diff(theta, t, 2))[0]

    return simplify(dd_theta)


def derive_tension():
    """
    Derive the tension of a taut string.

    Returns
    -------
    dict : 'omega_sq' (angular velocity squared along the arc) and 'T'
        (tension), both in terms of theta, alpha, omega0, r, m, g
    """
    print("=" * 60)
    print("Slack Pendulum: Symbolic Derivation")
    print("=" * 60)

    theta, alpha = symbols('theta alpha', real=True)
    omega0, omega_sq, T = symbols('omega0 omega_sq T', real=True)
    m, r, g = symbols('m r g', positive=True)

    print("\n1. Energy conservation along the arc...")

    # Kinetic + potential energy at theta equals the value at alpha
    energy_eq = sp.Eq(
        Rational(1, 2) * m * r**2 * omega_sq + m * g * r * sin(theta),
        Rational(1, 2) * m * r**2 * omega0**2 + m * g * r * sin(alpha),
    )
    omega_sq_expr = sp.solve(energy_eq, omega_sq)[0]
    print(f"   omega^2 = {omega_sq_expr}")

    print("\n2. Radial equation of motion...")

    # Centripetal force: tension plus the inward component of gravity
    # m r omega^2 = T + m g sin(theta)
    radial_eq = sp.Eq(m * r * omega_sq_expr, T + m * g * sin(theta))
    T_expr = sp.expand(sp.solve(radial_eq, T)[0])
    print(f"   T = {T_expr}")

    return {
        'symbols': (theta, alpha, omega0, r, m, g),
        'omega_sq': omega_sq_expr,
        'T': T_expr,
    }


def tension_function(derived: dict = None):
    """
    Numerical tension function.

    Returns
    -------
    callable : T(theta, alpha, omega0, r, m, g), numpy vectorized
    """
    if derived is None:
        derived = derive_tension()
    return lambdify(derived['symbols'], derived['T'], modules='numpy')


def main():
    """Derive and print the tension formula."""
    derived = derive_tension()

    print("\n3. Equation of motion from the Lagrangian...")
    dd_theta = derive_equation_of_motion()
    print(f"   theta'' = {dd_theta}")

    theta, alpha, omega0, r, m, g = derived['symbols']
    reference = m * g * (-3 * sin(theta) + 2 * sin(alpha) + r / g * omega0**2)
    difference = simplify(derived['T'] - reference)

    print("\n" + "=" * 60)
    if difference == 0:
        print("DONE! T = m g (-3 sin(theta) + 2 sin(alpha) + r/g omega0^2)")
    else:
        print(f"WARNING: derived tension differs from the model by {difference}")
    print("=" * 60)


if __name__ == "__main__":
    main()
