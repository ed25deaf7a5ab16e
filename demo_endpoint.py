"""
Quick demo script to run the Storefront backend locally.

This script starts a local server and shows how to make requests to it.
"""

import uvicorn

if __name__ == "__main__":
    print("=" * 60)
    print("Starting Storefront Backend Demo")
    print("=" * 60)
    print()
    print("API Endpoints:")
    print("   - Health Check:     GET    http://localhost:8000/health")
    print("   - Top Products:     GET    http://localhost:8000/products")
    print("   - Search:           GET    http://localhost:8000/products/search?q=bulb")
    print("   - Cart:             GET    http://localhost:8000/cart")
    print("   - Add to Cart:      POST   http://localhost:8000/cart/items")
    print("   - Account:          GET    http://localhost:8000/account")
    print("   - Recommendations:  POST   http://localhost:8000/functions/get-recommendations")
    print("   - API Docs:                http://localhost:8000/docs")
    print()
    print("Authentication:")
    print("   Cart, account, history and recommendations require:")
    print("   Authorization: Bearer <supabase access token>")
    print()
    print("Test with curl:")
    print('   curl -X POST "http://localhost:8000/functions/get-recommendations" \\')
    print('     -H "Authorization: Bearer $TOKEN" \\')
    print('     -H "Content-Type: application/json" \\')
    print('     -d \'{"userId": "<your user id>"}\'')
    print()
    print("=" * 60)
    print("Starting server on http://localhost:8000")
    print("Press Ctrl+C to stop")
    print("=" * 60)
    print()

    uvicorn.run(
        "storefront.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
